"""Application-wide constants.

This module centralizes all magic numbers and configuration constants
to ensure a single source of truth and easier maintenance.

Constants are organized by category. Most of them are surfaced as
overridable settings in ``rvo_agent.config``.
"""

# =============================================================================
# Target Site
# =============================================================================

# Origin that relative links ("/path") are resolved against
DEFAULT_SITE_BASE_URL = "https://www.rvo.nl"

# Page links must contain this domain to be offered to the planner
DEFAULT_SITE_DOMAIN = "rvo.nl"

# Extensions that mark a link as a downloadable document (substring match)
DOCUMENT_EXTENSIONS = (".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx")

# Maximum characters of anchor text kept per harvested link
MAX_LINK_TEXT_CHARS = 100

# =============================================================================
# Crawl Configuration
# =============================================================================

# Delay between consecutive successful target fetches (seconds)
POLITE_REQUEST_DELAY_SECONDS = 1.0

# Sub-page budget when the plan does not specify one
DEFAULT_MAX_PLAN_PAGES = 8

# Document budget when the plan does not specify one
DEFAULT_MAX_PLAN_DOCUMENTS = 5

# Regions stripped from a page before its text is used
BOILERPLATE_SELECTORS = "nav, header, footer, .navigation, .menu, .sidebar"

# =============================================================================
# HTTP Timeout Configuration
# =============================================================================

# Default timeout for scraper HTTP requests (seconds)
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0

# =============================================================================
# Reasoning Oracle
# =============================================================================

# Characters of main page text sent to the planner
PLAN_CONTENT_CHARS = 3000

# Characters of aggregated page/document text sent to the classifier
CLASSIFICATION_CONTENT_CHARS = 12000

# Low temperature biases the oracle towards schema-conformant JSON
PLAN_TEMPERATURE = 0.1
CLASSIFICATION_TEMPERATURE = 0.1

# Output token budgets per oracle call
PLAN_MAX_TOKENS = 1500
CLASSIFICATION_MAX_TOKENS = 2500

# Note stored on the requirement set when the classifier output is unusable
FALLBACK_ANALYSIS_NOTE = "Fallback analysis - no hardcoded patterns used"

# =============================================================================
# Attestation Vocabulary
# =============================================================================

# JSON file with an "attestation_schema" object (field key -> label)
DEFAULT_ATTESTATION_SCHEMA_PATH = "attestation-schema.json"
