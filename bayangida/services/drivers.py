"""Driver registrations and notifications."""

from bayangida import errors
from bayangida.models.driver import ApplicationStatus, Driver, VerificationStatus
from bayangida.models.notification import Notification
from bayangida.state.store import DocumentStore
from bayangida.utils.logging import get_logger

logger = get_logger(__name__)

_VERIFICATION_FOR_DECISION = {
    ApplicationStatus.APPROVED: VerificationStatus.VERIFIED,
    ApplicationStatus.REJECTED: VerificationStatus.REJECTED,
}


class DriverRegistry:
    """Driver listing and registration review."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_drivers(self, search: str | None = None) -> list[Driver]:
        """All drivers, newest registration first, optionally filtered."""
        drivers = await self.store.list_drivers()

        term = (search or "").strip()
        if term:
            drivers = [driver for driver in drivers if driver.matches(term)]

        return list(reversed(drivers))

    async def get_driver(self, driver_id: str) -> Driver:
        """Fetch one driver."""
        return await self.store.get_driver(driver_id)

    async def decide_application(
        self,
        driver_id: str,
        decision: ApplicationStatus | str,
    ) -> Driver:
        """
        Approve or reject a pending registration.

        Raises:
            ValidationError: decision is not approved or rejected
            NotFound: driver missing
            IllegalTransition: registration already decided
            ConcurrentUpdateConflict: driver changed meanwhile
        """
        try:
            decision = ApplicationStatus(decision)
        except ValueError as e:
            raise errors.ValidationError(
                f"Unknown decision '{decision}'", field="decision"
            ) from e
        if decision not in _VERIFICATION_FOR_DECISION:
            raise errors.ValidationError(
                "Decision must be 'approved' or 'rejected'", field="decision"
            )

        driver = await self.store.get_driver(driver_id)
        if driver.application_status != ApplicationStatus.PENDING:
            raise errors.IllegalTransition(
                driver.application_status.value, decision.value, subject="driver application"
            )

        patch = {
            "application_status": decision,
            "verification_status": _VERIFICATION_FOR_DECISION[decision],
        }
        if decision == ApplicationStatus.REJECTED:
            # Rejected drivers leave the assignment pool.
            patch["is_available"] = False

        driver = await self.store.update_driver(
            driver.id, patch, expected_version=driver.version
        )

        logger.info(
            "driver_application_decided",
            driver_id=driver.id,
            decision=decision.value,
        )
        return driver

    async def list_notifications(self, driver_id: str) -> list[Notification]:
        """A driver's notifications, newest first."""
        await self.store.get_driver(driver_id)
        return list(reversed(await self.store.list_notifications(driver_id)))
