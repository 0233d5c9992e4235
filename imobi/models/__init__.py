# Models package - database models
from imobi.models.enums import (
    LeadStatus, PropertyPurpose, PropertyStatus,
    RentalStatus, GuaranteeType, InstallmentStatus
)
from imobi.models.user import Organization, User
from imobi.models.lead import Lead
from imobi.models.property import PropertyType, Property, PropertyPhoto
from imobi.models.rental import Rental, RentalInstallment
from imobi.models.activity import ActivityLog, Actions
