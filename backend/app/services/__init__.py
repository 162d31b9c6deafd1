"""Business logic services"""

from backend.app.services.s3_service import S3Service
from backend.app.services.llm_service import TextGenerationService
from backend.app.services.candidate_service import CandidateService
from backend.app.services.cv_analysis_service import CVAnalysisService
from backend.app.services.dashboard_service import DashboardService
from backend.app.services.prompt_service import PromptService

__all__ = [
    'S3Service',
    'TextGenerationService',
    'CandidateService',
    'CVAnalysisService',
    'DashboardService',
    'PromptService',
]
