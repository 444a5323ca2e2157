"""FastAPI routes for the storefront: accounts, catalogue, reviews, cart and orders."""

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.accounts.address import Address
from storefront.accounts.addresses import AddAddress, RemoveAddress
from storefront.accounts.profile import DeactivateUser, UpdateUserProfile, assert_self_or_admin
from storefront.accounts.registration import RegisterUser
from storefront.accounts.user import User
from storefront.api.dependencies import current_user, current_user_id, require_admin
from storefront.api.schemas import (
    AddressRequest,
    AddressResponse,
    AddToCartRequest,
    AdjustStockRequest,
    CartResponse,
    CategoryRequest,
    CategoryResponse,
    CreateProductRequest,
    EditReviewRequest,
    OrderPage,
    OrderResponse,
    PlaceOrderRequest,
    ProductImageRequest,
    ProductPage,
    ProductResponse,
    RegisterUserRequest,
    ReviewPage,
    ReviewResponse,
    StatusResponse,
    SubmitReviewRequest,
    UpdateCartLineRequest,
    UpdateCategoryRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    UpdateProductRequest,
    UpdateUserRequest,
    UserIdResponse,
    UserPage,
    UserResponse,
)
from storefront.api.views import (
    address_view,
    cart_view,
    category_view,
    order_view,
    product_view,
    review_view,
    user_view,
)
from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart, ClearCart, OpenCart, RemoveCartLine, UpdateCartLine
from storefront.catalogue.category import Category
from storefront.catalogue.management import (
    AddProductImage,
    AdjustStock,
    CreateCategory,
    CreateProduct,
    RemoveCategory,
    RemoveProduct,
    UpdateCategory,
    UpdateProduct,
    adjust_stock,
    remove_product,
)
from storefront.catalogue.product import Product
from storefront.order.cancellation import CancelOrder, cancel_order
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder, place_order
from storefront.order.status import UpdateOrderStatus, UpdatePaymentStatus, run_with_order_locks
from storefront.reviews.management import EditReview, RemoveReview, SubmitReview
from storefront.reviews.review import Review

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(**body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@user_router.get("", response_model=UserPage, dependencies=[Depends(require_admin)])
async def list_users(
    keyword: str | None = None,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
) -> UserPage:
    results = current_domain.repository_for(User).active_page(keyword=keyword, page=page, size=size)
    return UserPage(items=[user_view(user) for user in results.items], page=page, size=size, total=results.total)


@user_router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(current_user)) -> UserResponse:
    return user_view(user)


@user_router.get("/me/addresses", response_model=list[AddressResponse])
async def list_my_addresses(user_id: str = Depends(current_user_id)) -> list[AddressResponse]:
    addresses = current_domain.repository_for(Address).for_user(user_id)
    return [address_view(address) for address in addresses]


@user_router.post("/me/addresses", status_code=201, response_model=AddressResponse)
async def add_my_address(body: AddressRequest, user_id: str = Depends(current_user_id)) -> AddressResponse:
    command = AddAddress(user_id=user_id, **body.model_dump(exclude_none=True))
    address_id = current_domain.process(command, asynchronous=False)
    return address_view(current_domain.repository_for(Address).get(address_id))


@user_router.delete("/me/addresses/{address_id}", response_model=StatusResponse)
async def remove_my_address(address_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(RemoveAddress(user_id=user_id, address_id=address_id), asynchronous=False)
    return StatusResponse()


# Declared after the /me routes so "me" is never taken for a user id
@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, actor_id: str = Depends(current_user_id)) -> UserResponse:
    assert_self_or_admin(actor_id, user_id)
    return user_view(current_domain.repository_for(User).get(user_id))


@user_router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, body: UpdateUserRequest, actor_id: str = Depends(current_user_id)) -> UserResponse:
    command = UpdateUserProfile(user_id=user_id, actor_id=actor_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return user_view(current_domain.repository_for(User).get(user_id))


@user_router.delete("/{user_id}", response_model=StatusResponse)
async def deactivate_user(user_id: str, admin: User = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeactivateUser(user_id=user_id, actor_id=admin.id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/categories", tags=["categories"])


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    return [category_view(category) for category in current_domain.repository_for(Category).list_all()]


@category_router.post("", status_code=201, response_model=CategoryResponse, dependencies=[Depends(require_admin)])
async def create_category(body: CategoryRequest) -> CategoryResponse:
    category_id = current_domain.process(CreateCategory(**body.model_dump(exclude_none=True)), asynchronous=False)
    return category_view(current_domain.repository_for(Category).get(category_id))


@category_router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str) -> CategoryResponse:
    return category_view(current_domain.repository_for(Category).get(category_id))


@category_router.put("/{category_id}", response_model=CategoryResponse, dependencies=[Depends(require_admin)])
async def update_category(category_id: str, body: UpdateCategoryRequest) -> CategoryResponse:
    command = UpdateCategory(category_id=category_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return category_view(current_domain.repository_for(Category).get(category_id))


@category_router.delete("/{category_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def remove_category(category_id: str) -> StatusResponse:
    current_domain.process(RemoveCategory(category_id=category_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductPage)
async def search_products(
    keyword: str | None = None,
    category_id: str | None = None,
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
) -> ProductPage:
    results = current_domain.repository_for(Product).search(
        keyword=keyword,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        page=page,
        size=size,
    )
    return ProductPage(
        items=[product_view(product) for product in results.items],
        page=page,
        size=size,
        total=results.total,
    )


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return product_view(current_domain.repository_for(Product).get(product_id))


@product_router.post("", status_code=201, response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def create_product(body: CreateProductRequest) -> ProductResponse:
    product_id = current_domain.process(CreateProduct(**body.model_dump(exclude_none=True)), asynchronous=False)
    return product_view(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    command = UpdateProduct(product_id=product_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return product_view(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def remove_product_listing(product_id: str) -> StatusResponse:
    remove_product(RemoveProduct(product_id=product_id))
    return StatusResponse()


@product_router.post("/{product_id}/stock", response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def adjust_product_stock(product_id: str, body: AdjustStockRequest) -> ProductResponse:
    adjust_stock(AdjustStock(product_id=product_id, delta=body.delta, reason=body.reason))
    return product_view(current_domain.repository_for(Product).get(product_id))


@product_router.post(
    "/{product_id}/images",
    status_code=201,
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
async def add_product_image(product_id: str, body: ProductImageRequest) -> ProductResponse:
    command = AddProductImage(product_id=product_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return product_view(current_domain.repository_for(Product).get(product_id))


@product_router.get("/{product_id}/reviews", response_model=ReviewPage)
async def list_product_reviews(
    product_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
) -> ReviewPage:
    current_domain.repository_for(Product).get(product_id)
    results = current_domain.repository_for(Review).page_for_product(product_id, page=page, size=size)
    items = [review_view(review) for review in results.items]
    return ReviewPage(items=items, page=page, size=size, total=results.total)


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewResponse)
async def submit_review(
    product_id: str, body: SubmitReviewRequest, user_id: str = Depends(current_user_id)
) -> ReviewResponse:
    command = SubmitReview(user_id=user_id, product_id=product_id, rating=body.rating, comment=body.comment)
    review_id = current_domain.process(command, asynchronous=False)
    return review_view(current_domain.repository_for(Review).get(review_id))


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
review_router = APIRouter(prefix="/reviews", tags=["reviews"])


@review_router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: str) -> ReviewResponse:
    return review_view(current_domain.repository_for(Review).get(review_id))


@review_router.put("/{review_id}", response_model=ReviewResponse)
async def edit_review(
    review_id: str, body: EditReviewRequest, user_id: str = Depends(current_user_id)
) -> ReviewResponse:
    command = EditReview(review_id=review_id, user_id=user_id, rating=body.rating, comment=body.comment)
    current_domain.process(command, asynchronous=False)
    return review_view(current_domain.repository_for(Review).get(review_id))


@review_router.delete("/{review_id}", response_model=StatusResponse)
async def remove_review(review_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(RemoveReview(review_id=review_id, user_id=user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart(cart_id) -> CartResponse:
    return cart_view(current_domain.repository_for(Cart).get(cart_id))


@cart_router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    return _cart(current_domain.process(OpenCart(user_id=user_id), asynchronous=False))


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, user_id: str = Depends(current_user_id)) -> CartResponse:
    command = AddToCart(user_id=user_id, product_id=body.product_id, quantity=body.quantity)
    return _cart(current_domain.process(command, asynchronous=False))


@cart_router.put("/items/{line_id}", response_model=CartResponse)
async def update_cart_item(
    line_id: str, body: UpdateCartLineRequest, user_id: str = Depends(current_user_id)
) -> CartResponse:
    command = UpdateCartLine(user_id=user_id, line_id=line_id, quantity=body.quantity)
    return _cart(current_domain.process(command, asynchronous=False))


@cart_router.delete("/items/{line_id}", response_model=CartResponse)
async def remove_cart_item(line_id: str, user_id: str = Depends(current_user_id)) -> CartResponse:
    return _cart(current_domain.process(RemoveCartLine(user_id=user_id, line_id=line_id), asynchronous=False))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(user_id: str = Depends(current_user_id)) -> CartResponse:
    return _cart(current_domain.process(ClearCart(user_id=user_id), asynchronous=False))


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _order(order_id) -> OrderResponse:
    return order_view(current_domain.repository_for(Order).get(order_id))


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: PlaceOrderRequest, user_id: str = Depends(current_user_id)) -> OrderResponse:
    command = PlaceOrder(
        user_id=user_id,
        shipping_address_id=body.shipping_address_id,
        billing_address_id=body.billing_address_id,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    return _order(place_order(command))


@order_router.get("", response_model=OrderPage)
async def list_my_orders(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
    user_id: str = Depends(current_user_id),
) -> OrderPage:
    results = current_domain.repository_for(Order).page_for_user(user_id, page=page, size=size)
    return OrderPage(items=[order_view(order) for order in results.items], page=page, size=size, total=results.total)


@order_router.get("/all", response_model=OrderPage, dependencies=[Depends(require_admin)])
async def list_all_orders(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
) -> OrderPage:
    results = current_domain.repository_for(Order).page_all(page=page, size=size)
    return OrderPage(items=[order_view(order) for order in results.items], page=page, size=size, total=results.total)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: User = Depends(current_user)) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    if not (order.belongs_to(user.id) or user.is_admin):
        raise ObjectNotFoundError({"order_id": [f"Order {order_id} not found"]})
    return order_view(order)


@order_router.patch("/{order_id}/status", response_model=OrderResponse, dependencies=[Depends(require_admin)])
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    run_with_order_locks(UpdateOrderStatus(order_id=order_id, status=body.status))
    return _order(order_id)


@order_router.patch(
    "/{order_id}/payment-status",
    response_model=OrderResponse,
    dependencies=[Depends(require_admin)],
)
async def update_payment_status(order_id: str, body: UpdatePaymentStatusRequest) -> OrderResponse:
    command = UpdatePaymentStatus(order_id=order_id, payment_status=body.payment_status)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_my_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    cancel_order(CancelOrder(order_id=order_id, user_id=user_id))
    return _order(order_id)
