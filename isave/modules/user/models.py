from isave.extensions import db, bcrypt
from isave.core.models import BaseModel
from isave.core.constants import UserRole


class User(BaseModel):
    __tablename__ = "users"

    name = db.Column(db.String(100), nullable=True)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.USER, nullable=False)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False)

    def set_password(self, password):
        """Hashes the password using Flask-Bcrypt before saving."""
        self.password = bcrypt.generate_password_hash(password).decode("utf-8")

    def check_password(self, password):
        """Checks the password hash."""
        return bcrypt.check_password_hash(self.password, password)

    def __repr__(self):
        return f"<User {self.username}>"
