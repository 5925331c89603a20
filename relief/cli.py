"""
Interactive terminal dashboard for the Disaster Relief Resources API.
Search, filter and manage resources with role-gated editing.
"""

import sys
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from relief.analysis import format_preview, format_summary
from relief.client import ApiError, AuthError, ReliefClient, identity_from_user
from relief.config import API_URL, FILTER_ALL, RESOURCE_STATUSES, RESOURCE_TYPES
from relief.filtering import FilterCriteria
from relief.models import Identity, Resource
from relief.rbac import can_mutate, describe_capability
from relief.validation import ResourceValidationError, validate_resource
from relief.views import humanize

FORM_FIELDS = [
    ("name", "Resource name *"),
    ("type", f"Type * ({'/'.join(RESOURCE_TYPES)})"),
    ("description", "Description"),
    ("location_name", "Location name *"),
    ("address", "Address *"),
    ("latitude", "Latitude *"),
    ("longitude", "Longitude *"),
    ("status", f"Status * ({'/'.join(RESOURCE_STATUSES)})"),
    ("quantity", "Quantity"),
    ("contact_name", "Contact name"),
    ("contact_phone", "Contact phone"),
    ("contact_email", "Contact email"),
]

OPTIONAL_FIELDS = {"description", "quantity", "contact_name", "contact_phone", "contact_email"}
CLEAR = "-"

HELP = """Commands:
  list                      show the visible resources
  search <text>             filter by name, location or address (empty clears)
  type <type|all>           filter by type
  status <status|all>       filter by status
  show <id>                 resource details
  add                       create a resource
  edit <id>                 edit a resource
  delete <id>               delete a resource
  summary                   counts by type and status
  refresh                   re-fetch resources
  logout                    sign out and log in again
  quit                      leave the dashboard
In forms a blank answer keeps the current value and "-" clears an optional field."""


class SignOut(Exception):
    """The user asked to log out; the dashboard returns to the login prompt."""


@dataclass
class DashboardState:
    """Everything the dashboard shows: who is logged in, filters and the list."""
    identity: Identity
    roles: Set[str] = field(default_factory=set)
    resources: Tuple[Resource, ...] = ()
    criteria: FilterCriteria = field(default_factory=FilterCriteria)

    @property
    def visible(self) -> List[Resource]:
        return self.criteria.apply(self.resources)

    def header(self) -> str:
        return f"{self.identity.email} - {describe_capability(self.roles)}"

    def counts(self) -> str:
        return f"Showing {len(self.visible)} of {len(self.resources)} resources"

    def can_edit(self, resource: Resource) -> bool:
        return can_mutate(resource, self.identity, self.roles)

    def matching(self, resource_id: str) -> List[Resource]:
        """Resources whose id is *resource_id*, or starts with it when no id matches exactly."""
        exact = [r for r in self.resources if r.id == resource_id]
        if exact:
            return exact
        return [r for r in self.resources if r.id.startswith(resource_id)]


def refresh(client: ReliefClient, state: DashboardState) -> None:
    """Replace the in-memory list with a fresh copy from the API."""
    try:
        state.resources = tuple(client.list_resources())
    except AuthError:
        raise
    except ApiError as e:
        print(f"\n[ERROR] Failed to fetch resources: {e.message}")


def prompt_form(input_fn: Callable[[str], str], current: Optional[Resource] = None) -> Dict[str, Any]:
    """
    Ask for every form field. When editing, a blank answer keeps the current
    value and "-" clears an optional field.
    """
    payload: Dict[str, Any] = {}
    for name, label in FORM_FIELDS:
        default = getattr(current, name) if current is not None else None
        suffix = f" [{default}]" if default not in (None, "") else ""
        raw = input_fn(f"  {label}{suffix}: ").strip()
        if raw == CLEAR and name in OPTIONAL_FIELDS:
            payload[name] = None
            continue
        value: Any = raw if raw else default
        if name in ("latitude", "longitude") and isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                pass
        if name == "quantity" and isinstance(value, str):
            try:
                value = int(value)
            except ValueError:
                pass
        payload[name] = value
    return payload


def print_details(state: DashboardState, r: Resource) -> None:
    print(f"\n{r.name}  [{humanize(r.type)} | {humanize(r.status)}]")
    print(f"  id:       {r.id}")
    if r.quantity is not None:
        print(f"  quantity: {r.quantity}")
    if r.description:
        print(f"  {r.description}")
    print(f"  location: {r.location_name}, {r.address} ({r.latitude}, {r.longitude})")
    if r.contact_name:
        contact = ", ".join(x for x in (r.contact_name, r.contact_phone, r.contact_email) if x)
        print(f"  contact:  {contact}")
    print(f"  editable: {'yes' if state.can_edit(r) else 'no'}")


def _submit(state: DashboardState, client: ReliefClient, input_fn, current: Optional[Resource]) -> None:
    payload = prompt_form(input_fn, current)
    try:
        validated = validate_resource(payload)
    except ResourceValidationError as e:
        print(f"\n[Validation Error] {e.message}")
        return

    try:
        if current is None:
            client.create_resource(validated.to_record())
            print("\n[ok] Resource created.")
        else:
            client.update_resource(current.id, validated.to_record())
            print("\n[ok] Resource updated.")
    except AuthError:
        raise
    except ApiError as e:
        print(f"\n[ERROR] Failed to save resource: {e.message}")
        return
    refresh(client, state)


def handle_command(client: ReliefClient, state: DashboardState, line: str,
                   input_fn: Callable[[str], str] = input) -> bool:
    """
    Run one dashboard command. Returns False when the user wants to leave;
    raises SignOut for `logout`.
    """
    cmd, _, arg = line.strip().partition(" ")
    cmd = cmd.lower()
    arg = arg.strip()

    if cmd in {"quit", "exit"}:
        return False
    if cmd == "logout":
        raise SignOut()

    if cmd == "help":
        print(HELP)
    elif cmd == "list":
        print(f"\n{state.counts()}")
        print(format_preview(state.visible))
    elif cmd == "search":
        state.criteria = replace(state.criteria, query=arg)
        print(f"\n{state.counts()}")
        print(format_preview(state.visible))
    elif cmd in {"type", "status"}:
        choices = RESOURCE_TYPES if cmd == "type" else RESOURCE_STATUSES
        value = arg.lower() or FILTER_ALL
        if value != FILTER_ALL and value not in choices:
            print(f"Unknown {cmd} '{value}'. Choose one of: all, {', '.join(choices)}")
            return True
        if cmd == "type":
            state.criteria = replace(state.criteria, type_filter=value)
        else:
            state.criteria = replace(state.criteria, status_filter=value)
        print(f"\n{state.counts()}")
        print(format_preview(state.visible))
    elif cmd == "refresh":
        refresh(client, state)
        print(f"\n{state.counts()}")
    elif cmd == "summary":
        try:
            print("\n" + format_summary(client.summary()))
        except AuthError:
            raise
        except ApiError as e:
            print(f"\n[ERROR] Failed to load summary: {e.message}")
    elif cmd in {"show", "edit", "delete"}:
        matches = state.matching(arg) if arg else []
        if not matches:
            print(f"No resource with id '{arg}'.")
            return True
        if len(matches) > 1:
            print(f"Ambiguous id '{arg}' matches {len(matches)} resources; type more of it.")
            return True
        resource = matches[0]
        if cmd == "show":
            print_details(state, resource)
        elif not state.can_edit(resource):
            print("You do not have permission to change this resource.")
        elif cmd == "edit":
            _submit(state, client, input_fn, resource)
        else:
            try:
                client.delete_resource(resource.id)
            except AuthError:
                raise
            except ApiError as e:
                print(f"\n[ERROR] Failed to delete resource: {e.message}")
                return True
            print("\n[ok] Resource deleted.")
            refresh(client, state)
    elif cmd == "add":
        _submit(state, client, input_fn, None)
    elif cmd:
        print(f"Unknown command '{cmd}'. Type 'help' for the list.")
    return True


def _sign_out(client: ReliefClient) -> None:
    try:
        client.logout()
    except AuthError:
        # Session already gone on the server.
        pass
    except ApiError as e:
        print("[WARN] Logout failed:", e.message)


def run_session(client: ReliefClient, user: Dict[str, Any],
                input_fn: Callable[[str], str] = input) -> bool:
    """
    Drive the REPL for one logged-in user.
    Returns True when the user wants to leave the program, False to log in again.
    """
    state = DashboardState(identity=identity_from_user(user), roles=set(user.get("roles", [])))
    print(f"\n[auth] Logged in as: {state.header()}")
    try:
        refresh(client, state)
        print(state.counts())
        print(HELP)

        while True:
            try:
                line = input_fn("\nrelief> ")
            except (EOFError, KeyboardInterrupt):
                print("\nExiting.")
                _sign_out(client)
                return True

            if not handle_command(client, state, line, input_fn):
                _sign_out(client)
                return True
    except SignOut:
        _sign_out(client)
        print("\n[auth] Logged out.")
    except AuthError:
        # Server already dropped the session.
        client.token = None
        print("\n[auth] Session expired. Please login again.", file=sys.stderr)
    return False


def main(input_fn: Callable[[str], str] = input, client: Optional[ReliefClient] = None):
    print("=== Disaster Relief Resources: terminal dashboard ===\n")
    client = client or ReliefClient(API_URL)

    # ── Login ────────────────────────────────────────────────────────
    while True:
        try:
            api_key = input_fn("Enter access key (or 'quit'): ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            return

        if not api_key:
            continue
        if api_key.lower() in {"quit", "exit"}:
            break

        try:
            user = client.login(api_key)
        except ApiError as e:
            print("\n[ERROR] Login failed.")
            print("Details:", e.message)
            continue

        if run_session(client, user, input_fn):
            break

    print("Goodbye.")


if __name__ == "__main__":
    main()
