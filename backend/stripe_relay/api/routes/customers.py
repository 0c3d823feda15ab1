import logging

import stripe
from fastapi import APIRouter, Depends

from stripe_relay.api.deps import stripe_api_key
from stripe_relay.api.errors import require
from stripe_relay.schemas.requests import CreateCustomer, UpdateCustomer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["customers"])


@router.post("/create-customer")
def create_customer(data: CreateCustomer, api_key: str = Depends(stripe_api_key)):
    require(data.email, "Email is required")

    customer = stripe.Customer.create(
        api_key=api_key,
        email=data.email,
        name=data.name,
        metadata=data.metadata or {},
    )
    logger.info(f"Customer created: {customer['id']}")
    return {"success": True, "customer": customer}


@router.post("/update-customer")
def update_customer(data: UpdateCustomer, api_key: str = Depends(stripe_api_key)):
    require(data.customer_id, "Customer ID is required")

    customer = stripe.Customer.modify(
        data.customer_id, api_key=api_key, **(data.model_extra or {})
    )
    return {"success": True, "customer": customer}


@router.get("/customer/{customer_id}")
def get_customer(customer_id: str, api_key: str = Depends(stripe_api_key)):
    customer = stripe.Customer.retrieve(customer_id, api_key=api_key)
    return {"success": True, "customer": customer}
