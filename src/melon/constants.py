ENV_FEATURES_PATH = 'MELON_FEATURES_PATH'
DEFAULT_FEATURES_PATH = 'tests/features'

CONTEXT_SCENARIO_NAME = 'scenario_name'
CONTEXT_REQUEST = 'request'

GLYPH_DONE = '✓'
GLYPH_FAILED = '✕'
GLYPH_SKIPPED = '⊘'
TRACE_DELIMITER = '---'
KEYWORD_WIDTH = 5

MESSAGE_NO_STEP_IMPL = 'No step implementation found'
