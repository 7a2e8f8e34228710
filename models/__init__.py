from .recommendation import Recommendation
from .feedback import RecommendationFeedback, InteractionType
