from pydantic import BaseModel
from pydantic_settings import BaseSettings
from typing import Optional


class RAGFlowInstance(BaseModel):
    """Connection details of a remote RAGFlow instance."""
    name: str = "default"
    api_url: str
    api_key: str
    timeout: float = 30.0
    description: Optional[str] = None


class Settings(BaseSettings):
    # Service Configuration
    service_name: str = "ragflow-bridge"
    service_version: str = "1.0.0"
    debug: bool = False

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Database Configuration
    database_url: str = "sqlite:///./ragflow_bridge.db"

    # RAGFlow Configuration
    ragflow_instance_name: str = "default"
    ragflow_api_url: str = "http://localhost:9380"
    ragflow_api_key: str = ""
    ragflow_timeout: float = 30.0

    # Dataset defaults
    default_chunk_method: str = "naive"
    default_embedding_model: str = "BAAI/bge-large-zh-v1.5"

    # Upload Configuration
    upload_dir: str = "./uploads"
    max_upload_size: int = 100 * 1024 * 1024

    # Monitoring Configuration
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def ragflow_instance(self) -> RAGFlowInstance:
        """Build the RAGFlow instance described by these settings."""
        return RAGFlowInstance(
            name=self.ragflow_instance_name,
            api_url=self.ragflow_api_url,
            api_key=self.ragflow_api_key,
            timeout=self.ragflow_timeout,
        )


# Global settings instance
settings = Settings()
