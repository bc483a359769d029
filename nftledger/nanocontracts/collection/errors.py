from nftledger.nanocontracts.access import Unauthorized  # noqa: F401
from nftledger.nanocontracts.exception import NCFail
from nftledger.nanocontracts.registry import (  # noqa: F401
    NonexistentToken,
    NotApprovedOrOwner,
    TransferFromIncorrectOwner,
)


# Admission


class AllowlistNotActive(NCFail):
    """Raised when an allow-list mint is attempted outside the allow-list phase."""

    pass


class PublicNotActive(NCFail):
    """Raised when a public mint is attempted outside the public phase."""

    pass


class OriginMismatch(NCFail):
    """Raised when a mint is relayed through another contract."""

    pass


class InvalidQuantity(NCFail):
    """Raised when a mint asks for less than one token."""

    pass


class QuantityLimitExceeded(NCFail):
    """Raised when a single call asks for more tokens than allowed."""

    pass


class SupplyExceeded(NCFail):
    """Raised when a mint would push the supply past its ceiling."""

    pass


class PaymentMismatch(NCFail):
    """Raised when the attached value is not exactly price times quantity."""

    pass


class InsufficientReservation(NCFail):
    """Raised when the caller's reserved allowance cannot cover the mint."""

    pass


# Proof


class ProofInvalid(NCFail):
    """Raised when an allow-list proof does not lead to the stored root."""

    pass


class ClaimCapExceeded(NCFail):
    """Raised when an account would claim more than its allow-list share."""

    pass


# State


class NotTokenOwner(NCFail):
    """Raised when the caller does not own the token."""

    pass


class RefundNotActive(NCFail):
    pass


class AlreadyRefunded(NCFail):
    pass


class FreeMintNotRefundable(NCFail):
    pass


class StakingClosed(NCFail):
    """Raised when staking is started while staking is closed."""

    pass


class RevealNotActive(NCFail):
    pass


class AlreadyShuffled(NCFail):
    pass


class NothingToWithdraw(NCFail):
    pass


class InvalidExemption(NCFail):
    """Raised when a transfer presents an unknown or spent exemption ticket."""

    pass


class InvalidPercentage(NCFail):
    pass


class InvalidPrice(NCFail):
    pass


# Policy


class StakingActive(NCFail):
    """Raised when a staked token is moved without an exemption."""

    pass


class TransfersDisabled(NCFail):
    """Raised when transfers are globally disabled."""

    pass


class OnlyOneTokenPerAccount(NCFail):
    """Raised when a transfer would leave an account with two tokens."""

    pass
