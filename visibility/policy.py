"""Access rules for profiles and their content.

Every read path decides visibility through :func:`resolve_access`; nothing else
in the project re-derives these rules. The function is pure: callers resolve
the edge state and organization overlap beforehand (see ``visibility.services``)
so that a single page of content costs a fixed number of queries.
"""

OWN_CONTENT = "own_content"
PUBLIC = "public"
FOLLOWER = "follower"
ORGANIZATION = "organization"

ACCEPTED = "accepted"


def resolve_access(
    viewer_id,
    owner_id,
    content_visibility: str,
    owner_visibility: str,
    edge_status: str | None = None,
    shares_organization: bool = False,
) -> str | None:
    """Return the name of the first rule granting access, or ``None`` when denied.

    Rules are evaluated in this order and the first match wins:

    1. the viewer owns the content;
    2. both the content and the owner's profile are public;
    3. the viewer has an *accepted* follow edge to the owner;
    4. the viewer and the owner share an organization tag.

    Pending and rejected edges grant nothing. Organization sharing applies even
    to private content of a private profile.
    """
    if viewer_id is not None and viewer_id == owner_id:
        return OWN_CONTENT
    if content_visibility == PUBLIC and owner_visibility == PUBLIC:
        return PUBLIC
    if viewer_id is None:
        return None
    if edge_status == ACCEPTED:
        return FOLLOWER
    if shares_organization:
        return ORGANIZATION
    return None


def can_view(viewer_id, owner_id, content_visibility, owner_visibility, edge_status=None, shares_organization=False) -> bool:
    return resolve_access(
        viewer_id, owner_id, content_visibility, owner_visibility, edge_status, shares_organization
    ) is not None
