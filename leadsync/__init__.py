"""leadsync -- IndiaMART lead emails from Gmail into a Google Sheet."""

from .checkpoint import (
    CheckpointStore,
    FileCheckpointStore,
    MemoryCheckpointStore,
    format_after,
    query_lower_bound,
)
from .config import (
    AuthConfig,
    ExtractorConfig,
    GmailConfig,
    LeadSyncConfig,
    SheetsConfig,
)
from .dedup import is_duplicate, seen_identifiers
from .extractor import LeadExtractor, strip_verification
from .interface import LeadStore, MailService
from .models import ExtractedFields, LeadRecord, RawMessage, RunSummary, Template
from .normalizer import RecordNormalizer, format_phone, truncate
from .pipeline import LeadPipeline

__all__ = [
    "AuthConfig",
    "CheckpointStore",
    "ExtractedFields",
    "ExtractorConfig",
    "FileCheckpointStore",
    "GmailConfig",
    "LeadExtractor",
    "LeadPipeline",
    "LeadRecord",
    "LeadStore",
    "LeadSyncConfig",
    "MailService",
    "MemoryCheckpointStore",
    "RawMessage",
    "RecordNormalizer",
    "RunSummary",
    "SheetsConfig",
    "Template",
    "format_after",
    "format_phone",
    "is_duplicate",
    "query_lower_bound",
    "seen_identifiers",
    "strip_verification",
    "truncate",
]
