"""Document services module"""

from legal_dashboard.app_api.documents.services.storage_service import (
    DocumentStorageService,
    get_storage_service,
)
from legal_dashboard.app_api.documents.services.analysis_service import (
    DocumentAnalysisService,
    get_analysis_service,
)

__all__ = [
    'DocumentStorageService',
    'get_storage_service',
    'DocumentAnalysisService',
    'get_analysis_service',
]
