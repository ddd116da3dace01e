"""Customer accounts: signup, login and the address book.

Plain-text passwords never enter a command. ``sign_up`` and ``log_in`` check
and hash them first, so that the command log only ever holds the hash.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import Conflict, InvalidInput, NotFound, Unauthorized
from storefront.identity.passwords import hash_password, verify_password
from storefront.identity.user import User, validate_signup
from storefront.order.order import REQUIRED_ADDRESS_FIELDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_LOGIN = "Invalid email or password"


@storefront.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255, sanitize=False)
    phone: String(required=True, max_length=10)


@storefront.command(part_of="User")
class RecordLogin:
    user_id: Identifier(required=True)


@storefront.command(part_of="User")
class AddAddress:
    user_id: Identifier(required=True)
    label: String(max_length=50)
    line1: String(max_length=255)
    line2: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    zip: String(max_length=20)
    country: String(max_length=2)
    phone: String(max_length=20)


@storefront.command_handler(part_of=User)
class ManageAccountsHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.by_email(command.email) is not None:
            raise Conflict("Email already registered")
        if repo.by_phone(command.phone) is not None:
            raise Conflict("Phone number already registered")

        user = User.register(
            name=command.name,
            email=command.email,
            password_hash=command.password_hash,
            phone=command.phone,
        )
        repo.add(user)
        logger.info("user_signed_up", user_id=str(user.id))
        return str(user.id)

    @handle(RecordLogin)
    def record_login(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.record_login()
        repo.add(user)

    @handle(AddAddress)
    def add_address(self, command):
        missing = [name for name in REQUIRED_ADDRESS_FIELDS if not (getattr(command, name) or "").strip()]
        if missing:
            raise InvalidInput(
                "Address must include line1, city, state and zip",
                {name: ["This field is required"] for name in missing},
            )

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        address = user.add_address(
            line1=command.line1,
            city=command.city,
            state=command.state,
            zip=command.zip,
            label=command.label,
            line2=command.line2,
            country=command.country,
            phone=command.phone,
        )
        repo.add(user)
        return str(address.id)


# ---------------------------------------------------------------------------
# Application services
# ---------------------------------------------------------------------------
def sign_up(name, email, password, phone) -> User:
    validate_signup(name, email, password, phone)
    user_id = current_domain.process(
        RegisterUser(
            name=name,
            email=email,
            password_hash=hash_password(password),
            phone=phone.strip(),
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(User).get(user_id)


def log_in(email, password) -> User:
    user = current_domain.repository_for(User).by_email(email)
    if user is None or not verify_password(password or "", user.password_hash):
        logger.info("login_failed")
        raise Unauthorized(INVALID_LOGIN)

    current_domain.process(RecordLogin(user_id=str(user.id)), asynchronous=False)
    return current_domain.repository_for(User).get(user.id)


def profile(user_id) -> User:
    user = current_domain.repository_for(User).query.filter(id=str(user_id)).all().first
    if user is None:
        raise NotFound("User not found")
    return user
