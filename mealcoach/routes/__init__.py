"""Routes package for the meal coach application."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .food import food_bp
    from .meals import meals_bp
    from .profile import profile_bp
    from .analysis import analysis_bp
    
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(food_bp, url_prefix='/api/food')
    app.register_blueprint(meals_bp, url_prefix='/api/meals')
    app.register_blueprint(profile_bp, url_prefix='/api/profile')
    app.register_blueprint(analysis_bp, url_prefix='/api/analysis')
