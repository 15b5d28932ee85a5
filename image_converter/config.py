# config.py
"""
Константы приложения конвертера изображений
"""

# Output defaults
DEFAULT_FORMAT = "jpeg"
FORMAT_CHOICES = ["jpeg", "png", "webp", "bmp"]

# Quality slider (percent, normalized to [0, 1] by the core)
QUALITY_MIN = 0
QUALITY_MAX = 100
QUALITY_DEFAULT = 80

# Rendering
RESAMPLE_FILTER = "LANCZOS"

# Delivery
DOWNLOAD_STAGGER_MS = 500
STAGING_DIR_PREFIX = "image_converter_"

# UI
STATUS_MESSAGE_MS = 3000
RESULT_POLL_MS = 50
THUMBNAIL_SIZE = (160, 120)
INPUT_FILETYPES = (
    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
    ("All files", "*.*"),
)

# Logging
LOGGER_NAME = "image_converter"
LOG_LEVEL_ENV = "IMAGE_CONVERTER_LOG_LEVEL"
