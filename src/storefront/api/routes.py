"""FastAPI endpoints for the storefront."""

from fastapi import APIRouter, Depends, Header, Query, Response
from protean.utils.globals import current_domain

from storefront.api.deps import current_user_id
from storefront.api.schemas import (
    AddressRequest,
    AddToCartRequest,
    AuthResponse,
    CartResponse,
    CategoryResponse,
    HomeCategory,
    HomeResponse,
    LoginRequest,
    MessageResponse,
    OrderPage,
    OrderResponse,
    PageMeta,
    PlaceOrderRequest,
    ProductDetail,
    ProductPage,
    ProductSummary,
    RemoveFromCartRequest,
    SignupRequest,
    Suggestion,
    SuggestionsResponse,
    UserResponse,
)
from storefront.cart import view as cart_view
from storefront.cart.items import AddToCart, RemoveFromCart
from storefront.catalogue import queries
from storefront.catalogue.queries import SearchCriteria
from storefront.identity import accounts
from storefront.identity.accounts import AddAddress
from storefront.identity.tokens import issue_token
from storefront.order import history
from storefront.order.placement import PlaceOrder

auth_router = APIRouter(prefix="/auth", tags=["auth"])
product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
search_router = APIRouter(tags=["search"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _set_session(response: Response, token: str) -> None:
    response.set_cookie(
        key=current_domain.AUTH_COOKIE_NAME,
        value=token,
        max_age=current_domain.JWT_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
    )


def _cart_response(user_id) -> CartResponse:
    cart = cart_view.cart_for(user_id)
    return CartResponse.from_cart(cart, cart_view.expanded_lines(cart), persisted=cart.state_.is_persisted)


def _product_page(page) -> ProductPage:
    return ProductPage(
        data=[ProductSummary.from_product(p) for p in page.items],
        meta=PageMeta.from_page(page),
    )


# --- Auth endpoints ---


@auth_router.post("/signup", status_code=201, response_model=AuthResponse)
async def signup(body: SignupRequest, response: Response) -> AuthResponse:
    user = accounts.sign_up(body.name, body.email, body.password, body.phone)
    token = issue_token(user.id)
    _set_session(response, token)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@auth_router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, response: Response) -> AuthResponse:
    user = accounts.log_in(body.email, body.password)
    token = issue_token(user.id)
    _set_session(response, token)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@auth_router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    response.delete_cookie(current_domain.AUTH_COOKIE_NAME)
    return MessageResponse(message="Logged out")


@auth_router.get("/me", response_model=UserResponse)
async def me(user_id: str = Depends(current_user_id)) -> UserResponse:
    return UserResponse.from_user(accounts.profile(user_id))


@auth_router.post("/add-address", status_code=201, response_model=UserResponse)
async def add_address(body: AddressRequest, user_id: str = Depends(current_user_id)) -> UserResponse:
    command = AddAddress(user_id=user_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(accounts.profile(user_id))


# --- Product endpoints ---


@product_router.get("/home", response_model=HomeResponse)
async def home() -> HomeResponse:
    return HomeResponse(
        categories=[
            HomeCategory(
                id=str(category.id),
                name=category.name,
                description=category.description,
                products=[ProductSummary.from_product(p) for p in products],
            )
            for category, products in queries.home()
        ]
    )


@product_router.get("", response_model=ProductPage)
async def search_products(
    q: str | None = None,
    brand: str | None = None,
    tags: str | None = None,
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    category_id: str | None = Query(None, alias="categoryId"),
    subcategory_id: str | None = Query(None, alias="subcategoryId"),
    page: int | None = None,
    limit: int | None = None,
    sort: str | None = None,
) -> ProductPage:
    criteria = SearchCriteria.build(
        q=q,
        brand=brand,
        tags=tags,
        min_price=min_price,
        max_price=max_price,
        category_id=category_id,
        subcategory_id=subcategory_id,
        page=page,
        limit=limit,
        sort=sort,
    )
    return _product_page(queries.search(criteria))


@product_router.get("/{product_id}", response_model=ProductDetail)
async def get_product(product_id: str) -> ProductDetail:
    return ProductDetail.from_product(queries.product_detail(product_id))


# --- Category endpoints ---


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    return [CategoryResponse.from_category(c) for c in queries.categories()]


@category_router.get("/{category_id}/products", response_model=ProductPage)
async def category_products(
    category_id: str,
    q: str | None = None,
    brand: str | None = None,
    tags: str | None = None,
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    subcategory_id: str | None = Query(None, alias="subcategoryId"),
    page: int | None = None,
    limit: int | None = None,
    sort: str | None = None,
) -> ProductPage:
    criteria = SearchCriteria.build(
        q=q,
        brand=brand,
        tags=tags,
        min_price=min_price,
        max_price=max_price,
        subcategory_id=subcategory_id,
        page=page,
        limit=limit,
        sort=sort,
    )
    return _product_page(queries.products_in_category(category_id, criteria))


# --- Search suggestions ---


@search_router.get("/search", response_model=SuggestionsResponse)
async def suggest(q: str | None = None) -> SuggestionsResponse:
    return SuggestionsResponse(
        suggestions=[
            Suggestion(id=str(p.id), title=p.title, brand=p.brand, url=f"/products/{p.id}")
            for p in queries.suggestions(q)
        ]
    )


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    return _cart_response(user_id)


@cart_router.post("/add", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, user_id: str = Depends(current_user_id)) -> CartResponse:
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        qty=body.qty,
        variant_sku=body.variant_sku,
        meta=body.meta or {},
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(user_id)


@cart_router.post("/remove", response_model=CartResponse)
async def remove_from_cart(body: RemoveFromCartRequest, user_id: str = Depends(current_user_id)) -> CartResponse:
    command = RemoveFromCart(user_id=user_id, product_id=body.product_id, variant_sku=body.variant_sku)
    current_domain.process(command, asynchronous=False)
    return _cart_response(user_id)


@cart_router.post("/place-order", status_code=201, response_model=OrderResponse)
async def place_order(
    body: PlaceOrderRequest,
    user_id: str = Depends(current_user_id),
    idempotency_key: str | None = Header(None, alias="Idempotency-Key", max_length=100),
) -> OrderResponse:
    address = body.shipping_address.model_dump() if body.shipping_address else {}
    command = PlaceOrder(
        user_id=user_id,
        shipping_address=address,
        idempotency_key=body.idempotency_key or idempotency_key,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(history.get_order(user_id, order_id))


# --- Order endpoints ---


@order_router.get("", response_model=OrderPage)
async def list_orders(
    status: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    user_id: str = Depends(current_user_id),
) -> OrderPage:
    result = history.list_orders(user_id, status=status, page=page, limit=limit)
    return OrderPage(
        data=[OrderResponse.from_order(o) for o in result.items],
        meta=PageMeta.from_page(result),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return OrderResponse.from_order(history.get_order(user_id, order_id))
