"""Catalogue management: commands and handlers for categories and products."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import CartLine
from storefront.catalogue.category import Category
from storefront.catalogue.product import Product, ProductImage
from storefront.domain import storefront
from storefront.order.order import OrderLine
from storefront.reviews.review import Review
from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name = String(required=True, max_length=100)
    description = Text()
    parent_category_id = Identifier()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id = Identifier(required=True)
    name = String(max_length=100)
    description = Text()
    parent_category_id = Identifier()


@storefront.command(part_of="Category")
class RemoveCategory:
    category_id = Identifier(required=True)


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=100)
    price = Float(required=True)
    stock_quantity = Integer(default=0)
    description = Text()
    category_id = Identifier()


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price = Float()
    category_id = Identifier()


@storefront.command(part_of="Product")
class AdjustStock:
    product_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(required=True, max_length=255)


@storefront.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class AddProductImage:
    product_id = Identifier(required=True)
    url = String(required=True, max_length=500)
    display_order = Integer()


def _ensure_category_exists(category_id):
    if category_id:
        # Raises ObjectNotFoundError for an unknown category
        current_domain.repository_for(Category).get(category_id)


def _parent_category(repo, parent_category_id):
    try:
        return repo.get(parent_category_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError(
            {"parent_category_id": [f"Category {parent_category_id} does not exist"]}
        ) from None


def _ensure_no_cycle(repo, category_id, parent_category_id):
    """Walk up from the proposed parent; reaching ``category_id`` means a cycle."""
    seen = set()
    current = _parent_category(repo, parent_category_id)
    while current is not None and str(current.id) not in seen:
        if str(current.id) == str(category_id):
            raise ValidationError({"parent_category_id": ["A category cannot be nested under itself"]})
        seen.add(str(current.id))
        current = repo.get(current.parent_category_id) if current.parent_category_id else None


@storefront.command_handler(part_of=Category)
class CategoryManagementHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        if repo.find_by_name(command.name) is not None:
            raise ConflictError({"name": [f"Category '{command.name}' already exists"]})

        if command.parent_category_id:
            _parent_category(repo, command.parent_category_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            parent_category_id=command.parent_category_id,
        )
        repo.add(category)

        logger.info("Category created", category_id=str(category.id), name=command.name)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None and command.name != category.name:
            existing = repo.find_by_name(command.name)
            if existing is not None and existing.id != category.id:
                raise ConflictError({"name": [f"Category '{command.name}' already exists"]})

        if command.parent_category_id:
            _ensure_no_cycle(repo, category.id, command.parent_category_id)

        category.update_details(
            name=command.name,
            description=command.description,
            parent_category_id=command.parent_category_id,
        )
        repo.add(category)
        return str(category.id)

    @handle(RemoveCategory)
    def remove_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if repo.has_subcategories(category.id):
            raise ValidationError({"category_id": ["Category has sub-categories and cannot be removed"]})
        if current_domain.repository_for(Product).count_in_category(category.id):
            raise ValidationError({"category_id": ["Category still has products and cannot be removed"]})

        repo._dao.delete(category)

        logger.info("Category removed", category_id=str(category.id), name=category.name)
        return str(category.id)


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_sku(command.sku) is not None:
            raise ConflictError({"sku": [f"Product with SKU '{command.sku}' already exists"]})

        _ensure_category_exists(command.category_id)

        product = Product.create(
            name=command.name,
            sku=command.sku,
            price=command.price,
            stock_quantity=command.stock_quantity,
            description=command.description,
            category_id=command.category_id,
        )
        repo.add(product)

        logger.info("Product created", product_id=str(product.id), sku=command.sku)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        _ensure_category_exists(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            category_id=command.category_id,
        )
        if command.price is not None:
            product.change_price(command.price)

        repo.add(product)
        return str(product.id)

    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.delta, command.reason)
        repo.add(product)

        logger.info(
            "Stock adjusted",
            product_id=str(product.id),
            delta=command.delta,
            stock_quantity=product.stock_quantity,
            reason=command.reason,
        )
        return product.stock_quantity

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product_id = str(product.id)

        if current_domain.repository_for(CartLine)._dao.query.filter(product_id=product_id).all().total:
            raise ValidationError({"product_id": ["Product is in a shopping cart and cannot be removed"]})
        if current_domain.repository_for(OrderLine)._dao.query.filter(product_id=product_id).all().total:
            raise ValidationError({"product_id": ["Product appears on an order and cannot be removed"]})

        review_repo = current_domain.repository_for(Review)
        for review in review_repo.for_product(product_id):
            review_repo._dao.delete(review)

        image_repo = current_domain.repository_for(ProductImage)
        for image in list(product.images):
            image_repo._dao.delete(image)
        repo._dao.delete(product)

        logger.info("Product removed", product_id=product_id, sku=product.sku)
        return product_id

    @handle(AddProductImage)
    def add_product_image(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        image = product.add_image(command.url, command.display_order)
        repo.add(product)
        return str(image.id)


def adjust_stock(command: AdjustStock) -> int:
    """Run ``AdjustStock`` under the product's inventory lock."""
    from storefront.order.guard import get_inventory_guard

    with get_inventory_guard().hold([command.product_id]):
        return current_domain.process(command, asynchronous=False)


def remove_product(command: RemoveProduct) -> str:
    """Run ``RemoveProduct`` under the product's inventory lock.

    Holding the lock keeps a concurrent placement from taking stock of a
    product that is being removed.
    """
    from storefront.order.guard import get_inventory_guard

    with get_inventory_guard().hold([command.product_id]):
        return current_domain.process(command, asynchronous=False)
