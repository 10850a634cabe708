"""Database models for the meal coach application."""

from .user import User
from .meal import MealRecord, FoodItem
from .profile import UserProfile

__all__ = ['User', 'MealRecord', 'FoodItem', 'UserProfile']
