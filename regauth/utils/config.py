"""
Configuration management for regauth.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from regauth.utils.exceptions import ConfigurationError

DEFAULT_CLIENT_NAME = "regauth"


class Config(BaseModel):
    """
    Configuration class for regauth with environment variable support.
    """
    
    # Client identity
    user_agent: str = Field(
        default=DEFAULT_CLIENT_NAME,
        description="User-Agent header sent with every request"
    )
    client_id: str = Field(
        default=DEFAULT_CLIENT_NAME,
        description="client_id sent to OAuth2 token endpoints"
    )
    
    # Communication Settings
    default_timeout: float = Field(
        default=30.0,
        description="Timeout for token service requests in seconds"
    )
    insecure: bool = Field(
        default=False,
        description="Allow falling back to plain http when probing registries"
    )
    
    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        description="Log format (json, text)"
    )

    @classmethod
    def load_from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "Config":
        """
        Load configuration from environment variables and optional .env file.
        
        Args:
            env_file: Optional path to .env file to load
            
        Returns:
            Config instance
        """
        if env_file:
            load_dotenv(env_file)
        else:
            for env_path in [".env", ".env.local"]:
                if os.path.exists(env_path):
                    load_dotenv(env_path)
                    break
        
        config_data = {}
        
        env_mapping = {
            "REGAUTH_USER_AGENT": "user_agent",
            "REGAUTH_CLIENT_ID": "client_id",
            "REGAUTH_DEFAULT_TIMEOUT": "default_timeout",
            "REGAUTH_INSECURE": "insecure",
            "REGAUTH_LOG_LEVEL": "log_level",
            "REGAUTH_LOG_FORMAT": "log_format",
        }
        
        for env_var, config_field in env_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                if config_field == "default_timeout":
                    try:
                        value = float(value)
                    except ValueError:
                        raise ConfigurationError(
                            f"Invalid float value for {env_var}: {value}"
                        )
                elif config_field == "insecure":
                    lowered = value.strip().lower()
                    if lowered in ("1", "true", "yes", "on"):
                        value = True
                    elif lowered in ("0", "false", "no", "off", ""):
                        value = False
                    else:
                        raise ConfigurationError(
                            f"Invalid boolean value for {env_var}: {value}"
                        )
                
                config_data[config_field] = value
        
        return cls(**config_data)
    
    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Create configuration from a dictionary."""
        return cls(**config_dict)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()


# Global configuration instance
_global_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.
    
    Returns:
        Global Config instance
    """
    global _global_config
    if _global_config is None:
        _global_config = Config.load_from_env()
    return _global_config


def set_config(config: Config) -> None:
    """
    Set the global configuration instance.
    
    Args:
        config: Config instance to set as global
    """
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to None."""
    global _global_config
    _global_config = None
