from .cli_config import CliConfig

__all__ = ['CliConfig']
