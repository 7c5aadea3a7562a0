from txroles.core.models import Authorization, Proposal, Receipt


def proposal_summary(p: Proposal) -> str:
    desc = p.description.strip() or "No description provided."
    return (
        f"I've created a transaction proposal for you. Here's what it will do:\n\n{desc}\n\n"
        f"Proposal ID: {p.proposalId}\n\nYou can now authorize this transaction when you're ready."
    )


def authorization_summary(a: Authorization) -> str:
    if a.approved:
        return (
            f"I've authorized the transaction proposal {a.proposalId}. "
            f"The transaction is now ready to be executed.\n\nAuthorization ID: {a.authorizationId}"
        )
    return f"I've rejected the transaction proposal {a.proposalId}. The transaction will not be executed."


def receipt_summary(r: Receipt) -> str:
    if r.sealed:
        return (
            "I've paid for and executed the transaction. The transaction has been sealed.\n\n"
            f"Transaction ID: {r.transactionId}\nResource used: {r.resourceUsed:.8f} (limit {r.resourceLimit})"
        )
    return (
        f"The transaction for authorization {r.authorizationId} failed to execute: {r.error or 'unknown error'}"
        f"\n\nTransaction ID: {r.transactionId}"
    )


def error_summary(action: str, message: str) -> str:
    return f"Unable to {action}: {message}"
