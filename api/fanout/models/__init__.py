from fanout.models.base import Base
from fanout.models.api_key import ApiKey
from fanout.models.integration import WorkspaceIntegration

__all__ = ["Base", "ApiKey", "WorkspaceIntegration"]
