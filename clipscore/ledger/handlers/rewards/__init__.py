from .apply_reward import RewardHandler

__all__ = ["RewardHandler"]
