"""
Instance (tenant) provisioning endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from resto_console.core.database import get_session
from resto_console.schemas.instance import InstanceCreate, InstanceResponse
from resto_console.services import provisioner

router = APIRouter()


@router.post("/create", response_model=InstanceResponse, status_code=status.HTTP_201_CREATED)
def create_instance(
    instance_data: InstanceCreate,
    session: Session = Depends(get_session)
):
    """Provision a new tenant and return its API key"""
    return provisioner.provision_tenant(session, instance_data)
