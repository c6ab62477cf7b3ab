"""
Constants for the URL load-time probe.

This module defines default values for all configurable parameters of the
probe. These constants are used as fallback values when neither a per-target
nor a global setting is provided, and for the command-line surface when
neither an argument nor an environment variable is given.
"""

# Target setting defaults
DEFAULT_TIMEOUT = 20
DEFAULT_ERROR_VALUE = 30
DEFAULT_REGEX_ERROR_VALUE = 40
DEFAULT_MATCH_OPTS = "-Ei"
DEFAULT_CLIENT_OPTS = '-H "Cache-Control: no-cache" -H "Pragma: no-cache" --retry 0'
DEFAULT_JOIN_LINES = "yes"

# Derived threshold factors, applied to the resolved timeout
WARNING_TIMEOUT_FACTOR = 0.5
CRITICAL_TIMEOUT_FACTOR = 1
MAX_TIMEOUT_FACTOR = 2

# Setting names
NAMES_SETTING = "names"
URL_SETTING = "url"
LABEL_SETTING = "label"
POST_DATA_SETTING = "post_data"
TIMEOUT_SETTING = "timeout"
WARNING_SETTING = "warning"
CRITICAL_SETTING = "critical"
MAX_SETTING = "max"
ERROR_VALUE_SETTING = "error_value"
REGEX_ERROR_VALUE_SETTING = "regex_error_value"
MATCH_OPTS_SETTING = "match_opts"
CLIENT_OPTS_SETTING = "client_opts"
JOIN_LINES_SETTING = "join_lines"
REGEX_HEADER_SETTING = "regex_header"
REGEX_BODY_SETTING = "regex_body"

# Graph metadata defaults
DEFAULT_GRAPH_TITLE = "URL load time"
DEFAULT_GRAPH_ARGS = "--base 1000 -l 0"
DEFAULT_GRAPH_SCALE = "no"
DEFAULT_GRAPH_VLABEL = "Load time in seconds"
DEFAULT_GRAPH_CATEGORY = "network"
DEFAULT_GRAPH_INFO = "This graph shows the load time of the configured URLs in seconds."

# Reported field name prefix
FIELD_PREFIX = "loadtime"

# Collector capability advertised through the environment
DIRTYCONFIG_ENV = "MUNIN_CAP_DIRTYCONFIG"

# Logging configuration defaults
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""
