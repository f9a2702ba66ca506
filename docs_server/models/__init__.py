"""Pydantic models for Docs Server."""

from docs_server.models.config import *
from docs_server.models.content import *
