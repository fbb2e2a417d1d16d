"""All magic values live here — no inline literals anywhere else."""

# Telegram typing indicator re-send interval (seconds).
# The TYPING action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_TYPING_INTERVAL: float = 4.0

# Gemini endpoints
GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-2.5-flash-lite"
GEMINI_GENERATE_PATH = "/models/%s:generateContent"
GEMINI_MODELS_PATH = "/models"
GEMINI_KEY_PARAM = "key"
GEMINI_GENERATE_METHOD = "generateContent"
GEMINI_MODEL_PREFIX = "models/"
GEMINI_TIMEOUT = 60
GEMINI_MAX_LISTED_MODELS = 3

# Retry on 503; attempts counts the first call too.
RETRY_MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS: float = 2.0
HTTP_OK = 200
HTTP_NOT_FOUND = 404
HTTP_UNAVAILABLE = 503

# Credential
CREDENTIAL_ENV_VAR = "GEMINI_API_KEY"
CREDENTIAL_PLACEHOLDER = "YOUR_API_KEY_HERE"

# Image normalization
IMAGE_MAX_DIMENSION = 1024
IMAGE_JPEG_QUALITY = 70
IMAGE_MEDIA_TYPE = "image/jpeg"
IMAGE_FORMAT = "JPEG"
IMAGE_BACKGROUND = (255, 255, 255)

# Request body
RESPONSE_MIME_TYPE = "application/json"
CONTENT_TYPE_HEADER = {"Content-Type": "application/json"}
MEAL_ANALYSIS_PROMPT = """\
Analyze this food image. Provide a JSON response with the following structure:
{
    "name": "Meal Name",
    "calories": 0,
    "protein": 0,
    "carbs": 0,
    "fat": 0,
    "cholesterol": "Low/Medium/High",
    "isAlcoholic": false,
    "warnings": ["Array", "of", "health", "warnings"]
}

- 'calories', 'protein', 'carbs', 'fat' should be Integers.
- 'cholesterol' should be exactly "High", "Medium", or "Low".
- 'warnings' should include things like "High Cholesterol", "Contains Alcohol", "Allergen: Peanuts", etc. if applicable.
- 'isAlcoholic' is true if the image contains alcoholic beverages.
"""

# Pipeline error messages (user-facing)
MSG_ERR_IMAGE = "Failed to process image."
MSG_ERR_MISSING_KEY = "GEMINI_API_KEY is missing or still set to the placeholder."
MSG_ERR_KEY_ENCODING = "Failed to encode API key."
MSG_ERR_INVALID_URL = "Failed to create URL from: %s"
MSG_ERR_TRANSPORT = "Network error talking to the analysis service: %s"
MSG_ERR_PROVIDER = "API Error (%d): %s"
MSG_ERR_UNKNOWN_BODY = "Unknown Error"
MSG_ERR_MODEL_NOT_FOUND = "Model not found. Available: %s"
MSG_ERR_NO_MODELS = "No accessible models found."
MSG_ERR_ENVELOPE = "The server returned an invalid response."
MSG_ERR_PAYLOAD = "Failed to read the AI response. It might be malformed."

# Log messages
MSG_BOT_STARTING = "Starting meal journal bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_RETRY_UNAVAILABLE = "503 Overloaded. Retrying (attempt %d/%d) in %.0fs"
MSG_MODEL_NOT_FOUND_LOG = "Model 404 at %s, listing available models"
MSG_MODEL_LIST_FAILED = "Model list lookup failed: %s"
MSG_ANALYSIS_DONE = "✓ Analyzed %r (%.1fs, %d attempt(s))"
MSG_SEND_FAIL = "Telegram send_message failed: %s"
MSG_IMAGE_FAILED = "Image normalization failed: %s"
MSG_IMAGE_NORMALIZED = "Normalized image to %dx%d (%d bytes)"
MSG_ENVELOPE_NO_TEXT = "Envelope without candidate text: %.200s"
MSG_PAYLOAD_REJECTED = "Analysis payload rejected: %s"
MSG_ANALYSIS_CANCELLED_LOG = "Analysis for %s cancelled"
MSG_ANALYSIS_FAILED_LOG = "Analysis failed: %s"
MSG_JOURNAL_LOAD_FAILED = "Journal load failed: %s, starting fresh"
MSG_JOURNAL_SAVE_FAILED = "Journal save failed: %s"
MSG_SEND_BEFORE_RUN = "send_message called before run()"
MSG_ANALYSIS_CRASHED = "Image analysis failed"
MSG_DOWNLOAD_FAILED = "Photo download failed"
MSG_TYPING_FAILED = "Typing action failed: %s"

# Chat replies
MSG_ANALYSIS_BUSY = "Still analyzing the previous photo — send /cancel to abort it."
MSG_ANALYSIS_FAILED = "Could not analyze meal — please try again."
MSG_ANALYSIS_CANCELLED = "Analysis cancelled."
MSG_NOTHING_TO_CANCEL = "No analysis in progress."
MSG_SAVE_HINT = "Send /save to add it to your journal."
MSG_NOTHING_TO_SAVE = "Nothing to save — send a meal photo first."
MSG_SAVED = "Saved %s to your journal."
MSG_JOURNAL_EMPTY = "Your journal is empty — send a meal photo to start."
MSG_JOURNAL_HEADER = "Food Journal"
MSG_DELETE_USAGE = "Usage: /delete <number from /journal>"
MSG_DELETE_NOT_FOUND = "No journal entry #%s."
MSG_DELETED = "Deleted %s."

# Analysis formatting
MSG_MACROS = "%d kcal · Protein %dg · Carbs %dg · Fat %dg"
MSG_CHOLESTEROL = "Cholesterol: %s"
MSG_ALCOHOL = "⚠️ Contains Alcohol"
MSG_WARNING = "Warning: %s"
MSG_JOURNAL_ROW = "%d. %s — %d kcal, %dp %dc %df%s"
MARK_ALCOHOL = " 🍷"
MARK_WARNING = " ⚠️"
JOURNAL_DAY_FORMAT = "%A, %d %B %Y"

# Commands
CMD_START = "start"
CMD_HELP = "help"
CMD_SAVE = "save"
CMD_JOURNAL = "journal"
CMD_DELETE = "delete"
CMD_CANCEL = "cancel"

MSG_HELP = (
    "Meal journal — photograph a meal, get its nutrition\n"
    "\n"
    "Commands:\n"
    "  /help            — show this message\n"
    "  /save            — save the last analysis to your journal\n"
    "  /journal         — list saved meals by day\n"
    "  /delete <n>      — delete meal #n from /journal\n"
    "  /cancel          — abort the analysis in progress\n"
    "\n"
    "Media:\n"
    "  Photo            — analyzed for calories, macros and warnings\n"
    "  Image file       — same as a photo, sent uncompressed\n"
)
