"""Real-time strategy feedback: validation, suggestions, impact and tips."""

from pinegenie.feedback.best_practices import get_best_practice_recommendations
from pinegenie.feedback.config import FeedbackConfig, load_feedback_config
from pinegenie.feedback.contextual import get_contextual_suggestions
from pinegenie.feedback.education import get_educational_tips
from pinegenie.feedback.errors import FeedbackConfigError, FeedbackError
from pinegenie.feedback.impact import analyze_performance_impact
from pinegenie.feedback.validator import validate_strategy

__all__ = [
    "FeedbackConfig",
    "FeedbackConfigError",
    "FeedbackError",
    "analyze_performance_impact",
    "get_best_practice_recommendations",
    "get_contextual_suggestions",
    "get_educational_tips",
    "load_feedback_config",
    "validate_strategy",
]
