# put config objects here
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Read the log level from the environment variable, defaulting to 'WARNING'
LOGGER_LEVEL = os.getenv('RECORD_SCHEMA_LOG_LEVEL', 'WARNING').upper()

# User supplied keys longer than this are truncated in key-check errors
MAX_KEY_LENGTH = int(os.getenv('RECORD_SCHEMA_MAX_KEY_LENGTH', '48'))

# Error messages
INVALID_KEY = 'invalidKey'
INVALID_OBJECT = 'invalidObject'
REQUIRED_MESSAGE = 'Required to be set'
NOT_NULL_MESSAGE = 'Cannot be null'
TYPE_MESSAGE = 'Not of type: {type}'
FAILED_MESSAGE = 'Failed: {rule}'
UNKNOWN_MESSAGE = 'Unknown: {rule}'
