import os


# ETL Configuration
class Config:
    OUTPUT_FOLDER = os.environ.get("RABO2KMM_OUTPUT_DIR", ".")
    ENCODING = os.environ.get("RABO2KMM_ENCODING", "utf-8")
    DEFAULT_VERSION = os.environ.get("RABO2KMM_FORMAT", "v3")
    LOG_FILE = os.environ.get("LOG_FILE", "rabo2kmm.log")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
