"""Error handling utilities."""


class HomeFindError(Exception):
    """Base exception for HomeFind backend."""
    pass


class SupabaseError(HomeFindError):
    """Supabase operation error."""
    pass


class DuplicateDocumentError(SupabaseError):
    """Insert rejected by a unique constraint."""
    pass


class IdentityProviderError(HomeFindError):
    """Clerk Backend API call failed."""
    pass


class WebhookVerificationError(HomeFindError):
    """Webhook signature verification failed."""
    pass


class NotFoundError(HomeFindError):
    """Requested document does not exist or is not visible to the caller."""
    pass


class RedirectRequired(HomeFindError):
    """
    Terminates a page-level request with a redirect.

    Raised by the agent gate and route guard; handlers turn it into a 307.
    """

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


class InvalidRequestError(HomeFindError):
    """Request body or query string could not be parsed."""
    pass
