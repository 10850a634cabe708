"""Meal record and food item models."""

from mealcoach import db
from mealcoach.utils.dates import utcnow

MEAL_TYPES = ('breakfast', 'lunch', 'dinner', 'snack')
FOOD_UNITS = ('g', 'ml', '個', '杯')


class MealRecord(db.Model):
    """One logged meal (breakfast, lunch, dinner or snack) with its food items."""
    
    __tablename__ = 'meal_records'
    
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    meal_type = db.Column(db.String(20), nullable=False)
    date = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    photo_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    
    items = db.relationship(
        'FoodItem',
        backref='meal_record',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='FoodItem.id'
    )
    
    def totals(self):
        """Sum calories and PFC over all items."""
        return {
            'calories': sum(item.calories or 0 for item in self.items),
            'protein': sum(item.protein or 0 for item in self.items),
            'fat': sum(item.fat or 0 for item in self.items),
            'carbohydrate': sum(item.carbohydrate or 0 for item in self.items),
        }
    
    def to_dict(self):
        """Convert meal record to dictionary."""
        return {
            'id': self.id,
            'userId': self.user_id,
            'mealType': self.meal_type,
            'date': self.date.isoformat(),
            'photoUrl': self.photo_url,
            'items': [item.to_dict() for item in self.items],
            'totals': self.totals(),
            'createdAt': self.created_at.isoformat(),
            'updatedAt': self.updated_at.isoformat()
        }
    
    def __repr__(self):
        return f'<MealRecord {self.id}: {self.meal_type} {self.date}>'


class FoodItem(db.Model):
    """A food eaten in a meal. Nutrition values are totals for the quantity."""
    
    __tablename__ = 'food_items'
    
    id = db.Column(db.Integer, primary_key=True)
    meal_record_id = db.Column(db.Integer, db.ForeignKey('meal_records.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(10), nullable=False)
    calories = db.Column(db.Float, default=0, nullable=False)
    protein = db.Column(db.Float, default=0, nullable=False)
    fat = db.Column(db.Float, default=0, nullable=False)
    carbohydrate = db.Column(db.Float, default=0, nullable=False)
    
    def to_dict(self):
        """Convert food item to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'quantity': self.quantity,
            'unit': self.unit,
            'calories': self.calories,
            'protein': self.protein,
            'fat': self.fat,
            'carbohydrate': self.carbohydrate
        }
    
    def __repr__(self):
        return f'<FoodItem {self.name} {self.quantity}{self.unit}>'
