"""
Orchestration Constants

Central location for pricing, token estimates and call settings used by the
orchestrator. Runtime overrides are read from the environment variables listed
at the bottom of this module (see OrchestrationConfig.from_env).
"""

# Pricing (USD per token, blended input/output rate for the default model)
DEFAULT_COST_PER_TOKEN = 0.000003

# Per-request cost ceiling when the caller does not supply one (USD)
DEFAULT_MAX_COST = 1.0

# Pre-flight token estimates
ORCHESTRATION_ESTIMATE_TOKENS = 4000
PER_AGENT_ESTIMATE_TOKENS = 3000
SYNTHESIS_ESTIMATE_TOKENS = 2000

# Inference call settings
AGENT_MAX_TOKENS = 4000
AGENT_TEMPERATURE = 0.3
SYNTHESIS_MAX_TOKENS = 2000
SYNTHESIS_TEMPERATURE = 0.4

# Per-call timeout in seconds
DEFAULT_AGENT_TIMEOUT_S = 60.0

# Default model for the Anthropic provider
DEFAULT_MODEL = "claude-3-7-sonnet-latest"

# Dependency order of the specialized roles
DEFAULT_EXECUTION_ORDER = ("security", "integration", "design", "quality")

# Confidence heuristic
CONFIDENCE_BASE = 0.7
CONFIDENCE_TOOL_WEIGHT = 0.2
CONFIDENCE_LENGTH_BONUS = 0.1
CONFIDENCE_LENGTH_THRESHOLD = 500

# Reasoning heuristic
REASONING_KEYWORDS = ("because", "since", "due to", "therefore", "as a result")

# Response shaping
MAX_SUGGESTIONS = 10
FALLBACK_SUMMARY_CHARS = 200

# Bounded history for execution metrics
DEFAULT_METRICS_HISTORY_SIZE = 500

# Environment variables
ENV_API_KEY = "ANTHROPIC_API_KEY"
ENV_MODEL = "WORKFLOW_AGENTS_MODEL"
ENV_COST_PER_TOKEN = "WORKFLOW_AGENTS_COST_PER_TOKEN"
ENV_MAX_COST = "WORKFLOW_AGENTS_MAX_COST"
ENV_AGENT_TIMEOUT = "WORKFLOW_AGENTS_AGENT_TIMEOUT"
ENV_PER_AGENT_BUDGET_CHECK = "WORKFLOW_AGENTS_PER_AGENT_BUDGET_CHECK"
