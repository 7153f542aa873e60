"""Routes package for the recipe translation backend."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .users import users_bp
    from .recipes import recipes_bp
    from .legacy import legacy_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(recipes_bp, url_prefix='/recipe')
    app.register_blueprint(legacy_bp)
