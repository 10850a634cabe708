"""Nutrition profile model: body data and daily nutrition goals."""

from mealcoach import db
from mealcoach.utils.dates import utcnow

GENDERS = ('male', 'female', 'other')
ACTIVITY_LEVELS = ('sedentary', 'lightly_active', 'moderately_active', 'very_active', 'extra_active')
GOALS = ('lose_weight', 'maintain_weight', 'gain_weight')

# Field names used by the API, mapped to model attributes
PROFILE_FIELDS = {
    'gender': 'gender',
    'birthDate': 'birth_date',
    'height': 'height',
    'weight': 'weight',
    'activityLevel': 'activity_level',
    'goal': 'goal',
    'targetCalories': 'target_calories',
    'targetProtein': 'target_protein',
    'targetFat': 'target_fat',
    'targetCarbs': 'target_carbs',
}


class UserProfile(db.Model):
    """Per-user profile. One row per user, created on first save."""
    
    __tablename__ = 'user_profiles'
    
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False, index=True)
    gender = db.Column(db.String(10), nullable=True)
    birth_date = db.Column(db.Date, nullable=True)
    height = db.Column(db.Float, nullable=True)  # cm
    weight = db.Column(db.Float, nullable=True)  # kg
    activity_level = db.Column(db.String(30), nullable=True)
    goal = db.Column(db.String(30), nullable=True)
    target_calories = db.Column(db.Integer, nullable=True)
    target_protein = db.Column(db.Integer, nullable=True)
    target_fat = db.Column(db.Integer, nullable=True)
    target_carbs = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    
    @staticmethod
    def empty_dict():
        """Profile data returned when the user has not saved a profile yet."""
        return {key: None for key in PROFILE_FIELDS}
    
    def to_dict(self):
        """Convert profile to dictionary."""
        data = {key: getattr(self, attr) for key, attr in PROFILE_FIELDS.items()}
        data['birthDate'] = self.birth_date.isoformat() if self.birth_date else None
        data['userId'] = self.user_id
        data['createdAt'] = self.created_at.isoformat()
        data['updatedAt'] = self.updated_at.isoformat()
        return data
    
    def __repr__(self):
        return f'<UserProfile user={self.user_id}>'
