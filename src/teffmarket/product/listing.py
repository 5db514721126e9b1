"""Catalog management: listing, editing and removing products."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from teffmarket.account.access import require_merchant
from teffmarket.domain import teffmarket
from teffmarket.product.product import Product, TeffVariety

logger = structlog.get_logger(__name__)


@teffmarket.command(part_of="Product")
class ListProduct:
    merchant_id = Identifier(required=True)
    variety = String(required=True, choices=TeffVariety)
    price_per_kilo = Float(required=True, min_value=0.0)
    stock_available = Float(required=True, min_value=0.0)
    description = String(max_length=500)


@teffmarket.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    variety = String(choices=TeffVariety)
    price_per_kilo = Float(min_value=0.0)
    stock_available = Float(min_value=0.0)
    description = String(max_length=500)


@teffmarket.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)
    caller_id = Identifier(required=True)


@teffmarket.command_handler(part_of=Product)
class ProductListingHandler:
    @handle(ListProduct)
    def list_product(self, command):
        require_merchant(command.merchant_id)

        product = Product.list_for_sale(
            merchant_id=command.merchant_id,
            variety=command.variety,
            price_per_kilo=command.price_per_kilo,
            stock_available=command.stock_available,
            description=command.description,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product listed", product_id=str(product.id), merchant_id=str(command.merchant_id))
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_active(command.product_id)
        product.ensure_owned_by(command.caller_id)
        product.update_details(
            variety=command.variety,
            price_per_kilo=command.price_per_kilo,
            stock_available=command.stock_available,
            description=command.description,
        )
        repo.add(product)

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_active(command.product_id)
        product.ensure_owned_by(command.caller_id)
        product.remove()
        repo.add(product)
