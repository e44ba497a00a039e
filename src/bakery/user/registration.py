"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from bakery.access import Role
from bakery.domain import bakery
from bakery.user.user import User


@bakery.command(part_of="User")
class RegisterUser:
    """Create a new account. Role defaults to customer."""

    username: String(required=True, max_length=50)
    email: String(max_length=254)
    full_name: String(max_length=150)
    role: String(choices=Role, default=Role.CUSTOMER.value)


@bakery.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        existing = repo._dao.query.filter(username=command.username).all()
        if existing.items:
            raise ValidationError({"username": ["Username is already taken"]})

        user = User.register(
            username=command.username,
            email=command.email,
            full_name=command.full_name,
            role=command.role or Role.CUSTOMER.value,
        )
        repo.add(user)
        return str(user.id)
