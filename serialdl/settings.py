VERSION = '0.1.0'

# Configure user agent
USER_AGENT = 'serialdl (+https://github.com/Easyoakland/royalroad-dl)'

# Minimum milliseconds between two fetch submissions. Can't be zero.
DEFAULT_TIME_LIMIT_MS = 1500

# Concurrent connections limit. Zero indicates no limit.
DEFAULT_CONNECTIONS = 4

# Token bucket shape for the rate limiter
RATE_LIMIT_CAPACITY = 1
RATE_LIMIT_INITIAL = 1

# Seconds before an HTTP request is abandoned
REQUEST_TIMEOUT = 30.0

# Appended to the output path when an unreadable file is about to be rewritten
BACKUP_SUFFIX = '.bk'

DEFAULT_EXTENSION = '.html'

# Position of the cosmetic slug in /fiction/<id>/<slug>/chapter/<id>/<slug>
LABEL_SEGMENT = 2

# Suffix the site appends to every page title
SITE_TITLE_SUFFIX = ' | Royal Road'
