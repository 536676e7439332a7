"""
Centralized constants for Prompt Exporter.
All magic numbers of the export pipeline live here.
"""

# ===========================================
# PARSER
# ===========================================
PARSER_MAX_PROMPT_LENGTH = 1000       # hard cutoff after whitespace collapse

# ===========================================
# ENHANCEMENT
# ===========================================
ENHANCEMENT_TIMEOUT_SECONDS = 30.0    # bounded wait on the enhancement service
ENHANCEMENT_MAX_TOKENS = 1024
ENHANCEMENT_TEMPERATURE = 0.4
DEFAULT_DETAIL_LEVEL = 'standard'

# ===========================================
# PIPELINE DEFAULTS
# ===========================================
DEFAULT_PLATFORM = 'midjourney'
DEFAULT_FORMAT = 'json'
FALLBACK_PLATFORM = 'custom'          # unknown platform ids resolve here
FALLBACK_FORMAT = 'json'

# ===========================================
# BATCH PROCESSING
# ===========================================
BATCH_MAX_CONCURRENCY = 4             # items rendered in parallel
BATCH_MAX_ITEMS = 200                 # files read from one folder
BATCH_TEXT_EXTENSIONS = ['.txt', '.md']
BATCH_STRUCTURED_EXTENSIONS = ['.json']

# ===========================================
# STORAGE
# ===========================================
DEFAULT_STORAGE_BACKEND = 'memory'    # memory | local
OUTPUT_DIR = 'data/output'
INPUT_DIR = 'data/input'

# ===========================================
# API / SERVER
# ===========================================
API_HOST = '0.0.0.0'
API_PORT = 3000
APP_VERSION = '1.0.0'

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/prompt_exporter.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
