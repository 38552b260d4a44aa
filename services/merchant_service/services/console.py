"""Wiring of the store-scoped services around one record store."""

from dataclasses import dataclass
from typing import Optional

from libs.baas.store import RecordStore
from services.merchant_service.services.collections import (
    CategoryCollection,
    OrderCollection,
    ProductCollection,
)
from services.merchant_service.services.profile import ProfileMirror, ProfileService
from services.merchant_service.services.scope import StoreResolver


@dataclass
class Console:
    store: RecordStore
    resolver: StoreResolver
    profiles: ProfileService
    categories: CategoryCollection
    products: ProductCollection
    orders: OrderCollection

    @classmethod
    def build(
        cls, store: RecordStore, mirror: Optional[ProfileMirror] = None
    ) -> "Console":
        resolver = StoreResolver(store)
        return cls(
            store=store,
            resolver=resolver,
            profiles=ProfileService(store, resolver, mirror=mirror),
            categories=CategoryCollection(store, resolver),
            products=ProductCollection(store, resolver),
            orders=OrderCollection(store, resolver),
        )
