from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_bcrypt import Bcrypt
from flask_cors import CORS

# browser panel calls the API from another origin
cors = CORS()

db = SQLAlchemy()
migrate = Migrate()

# bearer tokens for every HR route
jwt = JWTManager()

# HR password hashes
bcrypt = Bcrypt()
