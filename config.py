import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Catalog")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")

    # Persistence settings
    data_file: str = os.getenv("LIBRARY_DATA_FILE", "library.dat")
    persist: bool = os.getenv("LIBRARY_PERSIST", "True").lower() in ("true", "1", "yes")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")


settings = Settings()
