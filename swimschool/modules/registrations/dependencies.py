from fastapi import Depends
from swimschool.modules.classes.repository import ClassRepository
from swimschool.modules.payments.gateway import ZarinpalGateway, get_payment_gateway
from swimschool.modules.payments.repository import PaymentRepository
from swimschool.modules.registrations.repository import RegistrationRepository
from swimschool.modules.registrations.service import RegistrationService

def get_registration_service(
    registration_repo: RegistrationRepository = Depends(),
    class_repo: ClassRepository = Depends(),
    payment_repo: PaymentRepository = Depends(),
    gateway: ZarinpalGateway = Depends(get_payment_gateway),
) -> RegistrationService:
    return RegistrationService(
        registration_repo=registration_repo,
        class_repo=class_repo,
        payment_repo=payment_repo,
        gateway=gateway,
    )
