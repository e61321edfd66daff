"""
Streamlit Frontend for the Wedding Planner

This is the interface the couple uses day to day.

DESIGN PRINCIPLES:
1. One page per kind of record, all laid out the same way
2. Search and filters on every list
3. Explicit confirmation before anything is deleted
4. Validation messages shown next to the offending input
5. Store errors shown as they are; nothing is retried behind the user's back

Every page re-lists its whole collection after a write and recomputes
its numbers in memory.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

import streamlit as st

from planner.auth import Session, validate_password
from planner.config import get_settings, validate_all_settings
from planner.models import (
    BudgetScenarioCreate,
    BudgetScenarioUpdate,
    ExpenseCreate,
    ExpenseDisposition,
    ExpenseStatus,
    ExpenseUpdate,
    GuestCreate,
    GuestSide,
    GuestUpdate,
    NoteCreate,
    NoteUpdate,
    ProjectUpdate,
    RSVPStatus,
    TaskAssignee,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    TimelineEventCreate,
    TimelineEventUpdate,
    VendorCreate,
    VendorStatus,
    VendorUpdate,
)
from planner.orchestrator import (
    BudgetFlow,
    DashboardFlow,
    PlannerServices,
    create_app_components,
)
from planner.queries import (
    distinct_categories,
    distinct_tags,
    filter_events,
    filter_expenses,
    filter_guests,
    filter_notes,
    filter_tasks,
    filter_vendors,
)
from planner.stats import DashboardTimeoutError
from planner.validation import FORM_FIELD, FormValidator, summarize_issues


# Page configuration
st.set_page_config(
    page_title="Wedding Planner",
    page_icon="💍",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


VALIDATOR = FormValidator()


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> tuple[PlannerServices, DashboardFlow, BudgetFlow]:
    """Get or create application components (cached)."""
    return create_app_components()


def label(value: Any) -> str:
    """Human label for an enum member (or None as 'All')."""
    if value is None:
        return "All"
    return str(getattr(value, "value", value)).replace("_", " ").title()


def money(amount: Decimal, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


# =============================================================================
# SESSION GATE
# =============================================================================

def require_session() -> Session:
    """
    Show the login form until the password is entered.

    Stops the script run while there is no valid session.
    """
    session: Optional[Session] = st.session_state.get("session")

    if session is not None and not session.is_valid():
        st.session_state.pop("session", None)
        st.warning("⏰ Your session has expired. Please sign in again.")
        session = None

    if session is None:
        render_login_page()
        st.stop()

    return session


def render_login_page():
    st.title("💍 Wedding Planner")
    st.markdown("This planner is private. Enter the password to continue.")

    with st.form("login_form"):
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("🔓 Sign in", type="primary")

    if submitted:
        try:
            ok = validate_password(password)
        except Exception as e:
            st.error(f"Sign-in is not configured: {e}")
            return
        if ok:
            st.session_state.session = Session.start()
            st.rerun()
        else:
            st.error("❌ Wrong password")


def render_session_box(session: Session):
    """Countdown plus the renew-or-logout prompt in the sidebar."""
    remaining = int(session.remaining().total_seconds())
    minutes, seconds = divmod(remaining, 60)
    st.sidebar.caption(f"⏱️ Session: {minutes}:{seconds:02d} left")

    if session.should_warn():
        st.sidebar.warning("Your session is about to expire.")

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("🔄 Extend", key="extend_session"):
            st.session_state.session = session.renew()
            st.rerun()
    with col2:
        if st.button("🚪 Log out", key="logout"):
            st.session_state.pop("session", None)
            st.rerun()


# =============================================================================
# SHARED FORM / DELETE HELPERS
# =============================================================================

def field_errors(form_key: str, field: str):
    """Render validation messages stored for one input of a form."""
    result = st.session_state.get(f"{form_key}_result")
    if result is None:
        return
    for message in result.messages_for(field):
        st.caption(f":red[{message}]")


def form_banner(form_key: str):
    """Summary of the last failed submit plus cross-field messages."""
    result = st.session_state.get(f"{form_key}_result")
    if result is None or result.is_valid:
        return
    st.error(summarize_issues(result))
    for message in result.messages_for(FORM_FIELD):
        st.error(message)


def submit_form(
    form_key: str,
    model_cls: type,
    raw: dict[str, Any],
    save: Callable[[Any], Any],
    on_success: Optional[Callable[[], None]] = None,
    current: Any = None,
):
    """
    Validate a submitted form and save it.

    Edit forms pass the stored record as `current` so changes that
    would break a cross-field rule are shown next to the form.

    Invalid input is kept in session state so the next run shows the
    messages next to the inputs.
    """
    result = VALIDATOR.validate(model_cls, raw, current=current)
    st.session_state[f"{form_key}_result"] = result

    if not result.is_valid:
        # Rerun so the messages render next to the inputs
        st.rerun()

    try:
        run_async(save(result.model))
    except Exception as e:
        st.error(f"Error: {str(e)}")
        return

    st.session_state.pop(f"{form_key}_result", None)
    if on_success:
        on_success()
    st.rerun()


def start_editing(entity: str, record_id: Optional[str]):
    st.session_state[f"editing_{entity}"] = record_id or "new"
    st.session_state.pop(f"{entity}_form_result", None)


def stop_editing(entity: str):
    st.session_state.pop(f"editing_{entity}", None)
    st.session_state.pop(f"{entity}_form_result", None)


def editing(entity: str) -> Optional[str]:
    return st.session_state.get(f"editing_{entity}")


def delete_controls(entity: str, record_id: str, title: str, delete: Callable[[], Any]):
    """Delete button that asks for confirmation first."""
    pending_key = f"confirm_delete_{entity}"

    if st.session_state.get(pending_key) == record_id:
        st.warning(f"Delete **{title}**? This cannot be undone.")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("✅ Yes, delete", key=f"do_delete_{entity}_{record_id}"):
                try:
                    run_async(delete())
                except Exception as e:
                    st.error(f"Error: {str(e)}")
                    return
                st.session_state.pop(pending_key, None)
                st.rerun()
        with col2:
            if st.button("Cancel", key=f"cancel_delete_{entity}_{record_id}"):
                st.session_state.pop(pending_key, None)
                st.rerun()
    elif st.button("🗑️ Delete", key=f"delete_{entity}_{record_id}"):
        st.session_state[pending_key] = record_id
        st.rerun()


def load_or_report(coro):
    """Run a read; on failure show the raw error and stop the page."""
    try:
        return run_async(coro)
    except Exception as e:
        st.error(f"Error: {str(e)}")
        st.stop()


def current_currency(services: PlannerServices) -> str:
    try:
        project = run_async(services.project.get_main_project())
    except Exception:
        project = None
    return project.currency if project else get_settings().app.default_currency


# =============================================================================
# DASHBOARD
# =============================================================================

def render_dashboard_page(dashboard_flow: DashboardFlow):
    st.title("📊 Dashboard")

    with st.spinner("Loading your wedding..."):
        try:
            snapshot = run_async(dashboard_flow.load())
        except DashboardTimeoutError as e:
            st.error(f"⏰ {e}")
            return
        except Exception as e:
            st.error(f"Could not load data: {str(e)}")
            return

    project, stats = snapshot.project, snapshot.stats
    st.markdown(f"## {project.name}")
    if project.wedding_date:
        days_left = (project.wedding_date - date.today()).days
        st.markdown(f"**{project.wedding_date:%d %B %Y}** · {days_left} days to go")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Tasks done", f"{stats.tasks.done}/{stats.tasks.total}")
    col2.metric("Guests (heads)", f"{stats.guests.total} ({stats.guests.head_count})")
    col3.metric("Budget", money(stats.expenses.total, project.currency))
    col4.metric("Vendors booked", f"{stats.vendors.booked}/{stats.vendors.total}")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### ✅ Tasks")
        st.bar_chart({
            "status": ["To do", "Doing", "Done"],
            "tasks": [stats.tasks.todo, stats.tasks.doing, stats.tasks.done],
        }, x="status", y="tasks")
    with col2:
        st.markdown("### 👥 Guests")
        st.bar_chart({
            "rsvp": ["Confirmed", "Pending", "Not sent", "Declined"],
            "guests": [
                stats.guests.confirmed,
                stats.guests.pending,
                stats.guests.not_sent,
                stats.guests.declined,
            ],
        }, x="rsvp", y="guests")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### 💸 Expenses by status")
        st.bar_chart({
            "status": ["Planned", "Deposit", "Paid"],
            "amount": [
                float(stats.expenses.planned),
                float(stats.expenses.deposit),
                float(stats.expenses.paid_in_full),
            ],
        }, x="status", y="amount")
    with col2:
        st.markdown("### 🏪 Vendors")
        st.bar_chart({
            "status": ["Booked", "Considering", "Rejected"],
            "vendors": [stats.vendors.booked, stats.vendors.considering, stats.vendors.rejected],
        }, x="status", y="vendors")

    if stats.expenses.by_category:
        st.markdown("### 🏷️ Top categories")
        st.bar_chart({
            "category": [c.category for c in stats.expenses.by_category],
            "total": [float(c.total) for c in stats.expenses.by_category],
            "paid": [float(c.paid) for c in stats.expenses.by_category],
        }, x="category", y=["total", "paid"])

    col1, col2 = st.columns(2)
    col1.metric("Upcoming events", stats.events.upcoming, help=f"{stats.events.past} already past")
    col2.metric("Notes", stats.notes.total, help=f"{stats.notes.with_tags} tagged")
    st.caption(f"Loaded in {snapshot.load_seconds:.2f}s")


# =============================================================================
# TASKS
# =============================================================================

def render_tasks_page(services: PlannerServices):
    st.title("✅ Tasks")
    tasks = load_or_report(services.tasks.list())

    col1, col2, col3 = st.columns(3)
    with col1:
        query = st.text_input("🔍 Search tasks", key="task_search")
    with col2:
        status = st.selectbox("Status", [None] + list(TaskStatus), format_func=label, key="task_status_filter")
    with col3:
        priority = st.selectbox("Priority", [None] + list(TaskPriority), format_func=label, key="task_priority_filter")

    if st.button("➕ New task"):
        start_editing("task", None)
        st.rerun()

    if editing("task"):
        render_task_form(services, {t.id: t for t in tasks}.get(editing("task")))

    shown = filter_tasks(tasks, query, status, priority)
    st.caption(f"{len(shown)} of {len(tasks)} tasks")

    columns = st.columns(3)
    for column, column_status in zip(columns, TaskStatus):
        with column:
            st.markdown(f"### {label(column_status)}")
            for task in (t for t in shown if t.status == column_status):
                with st.container(border=True):
                    st.markdown(f"**{task.title}**")
                    details = [label(task.priority), label(task.assigned_to)]
                    if task.due_date:
                        details.append(f"due {task.due_date}")
                    st.caption(" · ".join(details))
                    if task.description:
                        st.write(task.description)

                    moves = [s for s in TaskStatus if s != task.status]
                    move_cols = st.columns(len(moves) + 1)
                    for move_col, target in zip(move_cols, moves):
                        with move_col:
                            if st.button(f"→ {label(target)}", key=f"move_{task.id}_{target.value}"):
                                try:
                                    run_async(services.tasks.update(task.id, {"status": target}))
                                except Exception as e:
                                    st.error(f"Error: {str(e)}")
                                else:
                                    st.rerun()
                    with move_cols[-1]:
                        if st.button("✏️", key=f"edit_task_{task.id}"):
                            start_editing("task", task.id)
                            st.rerun()
                    delete_controls("task", task.id, task.title, lambda t=task: services.tasks.delete(t.id))


def render_task_form(services: PlannerServices, current):
    form_key = "task_form"
    with st.form(form_key):
        form_banner(form_key)
        st.markdown("### ✏️ Edit task" if current else "### ➕ New task")
        title = st.text_input("Title *", value=current.title if current else "")
        field_errors(form_key, "title")
        description = st.text_area("Description", value=(current.description or "") if current else "")
        field_errors(form_key, "description")

        col1, col2, col3 = st.columns(3)
        with col1:
            status = st.selectbox(
                "Status", list(TaskStatus), format_func=label,
                index=list(TaskStatus).index(current.status) if current else 0,
            )
        with col2:
            priority = st.selectbox(
                "Priority", list(TaskPriority), format_func=label,
                index=list(TaskPriority).index(current.priority if current else TaskPriority.MEDIUM),
            )
        with col3:
            assigned_to = st.selectbox(
                "Assigned to", list(TaskAssignee), format_func=label,
                index=list(TaskAssignee).index(current.assigned_to if current else TaskAssignee.BOTH),
            )

        col1, col2 = st.columns(2)
        with col1:
            due_date = st.date_input("Due date", value=current.due_date if current else None)
            field_errors(form_key, "due_date")
        with col2:
            category = st.text_input("Category", value=(current.category or "") if current else "")
            field_errors(form_key, "category")

        col1, col2 = st.columns(2)
        saved = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("Cancel")

    if cancelled:
        stop_editing("task")
        st.rerun()

    if saved:
        raw = {
            "title": title,
            "description": description,
            "status": status,
            "priority": priority,
            "assigned_to": assigned_to,
            "due_date": due_date,
            "category": category,
        }
        if current:
            submit_form(form_key, TaskUpdate, raw,
                        lambda m: services.tasks.update(current.id, m),
                        on_success=lambda: stop_editing("task"))
        else:
            submit_form(form_key, TaskCreate, raw, services.tasks.create,
                        on_success=lambda: stop_editing("task"))


# =============================================================================
# GUESTS
# =============================================================================

def render_guests_page(services: PlannerServices):
    st.title("👥 Guests")
    guests = load_or_report(services.guests.list())

    col1, col2, col3 = st.columns(3)
    with col1:
        query = st.text_input("🔍 Search guests", key="guest_search")
    with col2:
        side = st.selectbox("Side", [None] + list(GuestSide), format_func=label, key="guest_side_filter")
    with col3:
        rsvp = st.selectbox("RSVP", [None] + list(RSVPStatus), format_func=label, key="guest_rsvp_filter")

    shown = filter_guests(guests, query, side, rsvp)
    heads = sum(g.head_count for g in shown)
    st.caption(f"{len(shown)} of {len(guests)} guests · {heads} people")

    if st.button("➕ New guest"):
        start_editing("guest", None)
        st.rerun()

    if editing("guest"):
        render_guest_form(services, {g.id: g for g in guests}.get(editing("guest")))

    for guest in shown:
        with st.expander(f"{guest.full_name} · {label(guest.side)} · RSVP {label(guest.rsvp)}"):
            if guest.has_companion:
                st.markdown("➕ Brings a companion")
            if guest.email:
                st.markdown(f"📧 {guest.email}")
            if guest.phone:
                st.markdown(f"📞 {guest.phone}")
            if guest.dietary_restrictions:
                st.markdown(f"🥗 {guest.dietary_restrictions}")
            if guest.notes:
                st.write(guest.notes)
            if st.button("✏️ Edit", key=f"edit_guest_{guest.id}"):
                start_editing("guest", guest.id)
                st.rerun()
            delete_controls("guest", guest.id, guest.full_name, lambda g=guest: services.guests.delete(g.id))


def render_guest_form(services: PlannerServices, current):
    form_key = "guest_form"
    with st.form(form_key):
        form_banner(form_key)
        st.markdown("### ✏️ Edit guest" if current else "### ➕ New guest")
        col1, col2 = st.columns(2)
        with col1:
            first_name = st.text_input("First name *", value=current.first_name if current else "")
            field_errors(form_key, "first_name")
        with col2:
            last_name = st.text_input("Last name", value=(current.last_name or "") if current else "")
            field_errors(form_key, "last_name")

        col1, col2 = st.columns(2)
        with col1:
            email = st.text_input("Email", value=(current.email or "") if current else "")
            field_errors(form_key, "email")
        with col2:
            phone = st.text_input("Phone", value=(current.phone or "") if current else "")
            field_errors(form_key, "phone")

        col1, col2, col3 = st.columns(3)
        with col1:
            side = st.selectbox(
                "Side *", list(GuestSide), format_func=label,
                index=list(GuestSide).index(current.side) if current else 0,
            )
        with col2:
            rsvp = st.selectbox(
                "RSVP", list(RSVPStatus), format_func=label,
                index=list(RSVPStatus).index(current.rsvp) if current else 0,
            )
        with col3:
            has_companion = st.checkbox("Brings a companion", value=current.has_companion if current else False)

        dietary = st.text_input(
            "Dietary restrictions",
            value=(current.dietary_restrictions or "") if current else "",
        )
        field_errors(form_key, "dietary_restrictions")
        notes = st.text_area("Notes", value=(current.notes or "") if current else "")
        field_errors(form_key, "notes")

        col1, col2 = st.columns(2)
        saved = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("Cancel")

    if cancelled:
        stop_editing("guest")
        st.rerun()

    if saved:
        raw = {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "phone": phone,
            "side": side,
            "rsvp": rsvp,
            "has_companion": has_companion,
            "dietary_restrictions": dietary,
            "notes": notes,
        }
        if current:
            submit_form(form_key, GuestUpdate, raw,
                        lambda m: services.guests.update(current.id, m),
                        on_success=lambda: stop_editing("guest"))
        else:
            submit_form(form_key, GuestCreate, raw, services.guests.create,
                        on_success=lambda: stop_editing("guest"))


# =============================================================================
# BUDGET
# =============================================================================

def render_budget_page(services: PlannerServices, budget_flow: BudgetFlow):
    st.title("💰 Budget")
    currency = current_currency(services)
    view = load_or_report(budget_flow.load(st.session_state.get("selected_scenario")))

    if not view.scenarios:
        st.info("📋 No budget scenarios yet. Create the first one to start adding expenses.")
        render_scenario_form(services, None)
        return

    ids = [s.id for s in view.scenarios]
    names = {s.id: f"{s.name}{' ✅' if s.is_active else ''}" for s in view.scenarios}
    selected_id = st.selectbox(
        "Scenario",
        ids,
        index=ids.index(view.selected.id),
        format_func=lambda i: names[i],
    )
    if selected_id != view.selected.id:
        st.session_state.selected_scenario = selected_id
        st.rerun()
    selected = view.selected

    if selected.description:
        st.caption(selected.description)
    if view.orphaned_count:
        st.warning(f"{view.orphaned_count} expenses belong to a scenario that no longer exists.")

    render_scenario_actions(services, view)

    summary = view.summary
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total", money(summary.total, currency))
    col2.metric("Paid", money(summary.paid, currency))
    col3.metric("Remaining", money(summary.remaining, currency))
    col4.metric("Expenses", summary.count)

    col1, col2, col3 = st.columns(3)
    col1.caption(f"Planned: {money(summary.planned, currency)} ({summary.planned_count})")
    col2.caption(f"Deposit: {money(summary.deposit, currency)} ({summary.deposit_count})")
    col3.caption(f"Paid in full: {money(summary.paid_in_full, currency)} ({summary.paid_count})")

    if summary.by_category:
        st.markdown("### 🏷️ By category")
        st.dataframe(
            [
                {
                    "Category": c.category,
                    "Total": float(c.total),
                    "Paid": float(c.paid),
                    "Remaining": float(c.remaining),
                    "Count": c.count,
                }
                for c in summary.by_category
            ],
            use_container_width=True,
            hide_index=True,
        )

    st.markdown("---")
    st.markdown("### 💸 Expenses")

    col1, col2, col3 = st.columns(3)
    with col1:
        query = st.text_input("🔍 Search expenses", key="expense_search")
    with col2:
        status = st.selectbox("Status", [None] + list(ExpenseStatus), format_func=label, key="expense_status_filter")
    with col3:
        category = st.selectbox(
            "Category",
            [None] + distinct_categories(view.expenses),
            format_func=lambda c: "All" if c is None else c,
        )

    if st.button("➕ New expense"):
        start_editing("expense", None)
        st.rerun()

    if editing("expense"):
        current = {e.id: e for e in view.expenses}.get(editing("expense"))
        render_expense_form(services, selected.id, current)

    for expense in filter_expenses(view.expenses, query, status, category):
        with st.expander(
            f"{expense.title} · {expense.category} · {money(expense.amount, currency)} · {label(expense.status)}"
        ):
            st.markdown(
                f"Paid: **{money(expense.effective_paid, currency)}** · "
                f"Remaining: **{money(expense.remaining, currency)}**"
            )
            if expense.due_date:
                st.markdown(f"📅 Due {expense.due_date}")
            if expense.description:
                st.write(expense.description)
            if st.button("✏️ Edit", key=f"edit_expense_{expense.id}"):
                start_editing("expense", expense.id)
                st.rerun()
            delete_controls("expense", expense.id, expense.title,
                            lambda e=expense: services.expenses.delete(e.id))


def render_scenario_actions(services: PlannerServices, view):
    selected = view.selected

    col1, col2, col3 = st.columns(3)
    with col1:
        if not selected.is_active and st.button("✅ Make active"):
            try:
                run_async(services.scenarios.activate(selected.id))
            except Exception as e:
                st.error(f"Error: {str(e)}")
            else:
                st.rerun()

    with col2:
        with st.popover("📄 Clone"):
            new_name = st.text_input("Name of the copy", value=f"{selected.name} (copy)")
            if st.button("Clone scenario", type="primary"):
                try:
                    new_id = run_async(services.scenarios.clone_scenario(selected.id, new_name))
                except Exception as e:
                    st.error(f"Error: {str(e)}")
                else:
                    st.session_state.selected_scenario = new_id
                    st.rerun()

    with col3:
        with st.popover("🗑️ Delete scenario"):
            render_scenario_delete(services, view)

    with st.expander("➕ New scenario"):
        render_scenario_form(services, None)
    with st.expander("✏️ Edit scenario"):
        render_scenario_form(services, selected)

    with st.expander("⚖️ Compare scenarios"):
        st.dataframe(
            [
                {
                    "Scenario": s.name,
                    "Active": "✅" if s.is_active else "",
                    "Total": float(s.total),
                    "Planned": float(s.planned),
                    "Deposit": float(s.deposit),
                    "Paid": float(s.paid),
                    "Expenses": s.count,
                }
                for s in view.comparison
            ],
            use_container_width=True,
            hide_index=True,
        )


def render_scenario_delete(services: PlannerServices, view):
    selected = view.selected
    others = [s for s in view.scenarios if s.id != selected.id]

    options = [ExpenseDisposition.ORPHAN, ExpenseDisposition.CASCADE]
    if others:
        options.append(ExpenseDisposition.REASSIGN)
    descriptions = {
        ExpenseDisposition.ORPHAN: "Keep its expenses (they stay unassigned)",
        ExpenseDisposition.CASCADE: "Delete its expenses too",
        ExpenseDisposition.REASSIGN: "Move its expenses to another scenario",
    }
    disposition = st.radio(
        f"What happens to the {len(view.expenses)} expenses of '{selected.name}'?",
        options,
        format_func=lambda d: descriptions[d],
    )

    reassign_to = None
    if disposition == ExpenseDisposition.REASSIGN:
        reassign_to = st.selectbox(
            "Move to",
            [s.id for s in others],
            format_func=lambda i: next(s.name for s in others if s.id == i),
        )

    if st.button("🗑️ Delete for good", type="primary"):
        try:
            run_async(services.scenarios.delete(selected.id, expenses=disposition, reassign_to=reassign_to))
        except Exception as e:
            st.error(f"Error: {str(e)}")
        else:
            st.session_state.pop("selected_scenario", None)
            st.rerun()


def render_scenario_form(services: PlannerServices, current):
    form_key = f"scenario_form_{current.id if current else 'new'}"
    with st.form(form_key):
        form_banner(form_key)
        name = st.text_input("Name *", value=current.name if current else "", key=f"{form_key}_name")
        field_errors(form_key, "name")
        description = st.text_area(
            "Description",
            value=(current.description or "") if current else "",
            key=f"{form_key}_description",
        )
        field_errors(form_key, "description")
        is_active = st.checkbox(
            "Active scenario",
            value=current.is_active if current else False,
            key=f"{form_key}_is_active",
        )
        saved = st.form_submit_button("💾 Save", type="primary")

    if saved:
        raw = {"name": name, "description": description, "is_active": is_active}
        if current:
            submit_form(form_key, BudgetScenarioUpdate, raw,
                        lambda m: services.scenarios.update(current.id, m))
        else:
            submit_form(form_key, BudgetScenarioCreate, raw, services.scenarios.create)


def render_expense_form(services: PlannerServices, scenario_id: str, current):
    form_key = "expense_form"
    with st.form(form_key):
        form_banner(form_key)
        st.markdown("### ✏️ Edit expense" if current else "### ➕ New expense")
        col1, col2 = st.columns(2)
        with col1:
            title = st.text_input("Title *", value=current.title if current else "")
            field_errors(form_key, "title")
        with col2:
            category = st.text_input("Category *", value=current.category if current else "")
            field_errors(form_key, "category")

        col1, col2, col3 = st.columns(3)
        with col1:
            amount = st.text_input("Amount *", value=str(current.amount) if current else "")
            field_errors(form_key, "amount")
        with col2:
            status = st.selectbox(
                "Status", list(ExpenseStatus), format_func=label,
                index=list(ExpenseStatus).index(current.status) if current else 0,
            )
        with col3:
            paid_amount = st.text_input(
                "Paid so far",
                value=str(current.paid_amount) if current and current.paid_amount is not None else "",
            )
            field_errors(form_key, "paid_amount")

        due_date = st.date_input("Due date", value=current.due_date if current else None)
        field_errors(form_key, "due_date")
        description = st.text_area("Description", value=(current.description or "") if current else "")
        field_errors(form_key, "description")

        col1, col2 = st.columns(2)
        saved = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("Cancel")

    if cancelled:
        stop_editing("expense")
        st.rerun()

    if saved:
        raw = {
            "title": title,
            "category": category,
            "amount": amount.strip().replace(",", ".") or None,
            "status": status,
            "paid_amount": paid_amount.strip().replace(",", ".") or None,
            "due_date": due_date,
            "description": description,
            "scenario_id": scenario_id,
        }
        if current:
            submit_form(form_key, ExpenseUpdate, raw,
                        lambda m: services.expenses.update(current.id, m),
                        on_success=lambda: stop_editing("expense"),
                        current=current)
        else:
            submit_form(form_key, ExpenseCreate, raw, services.expenses.create,
                        on_success=lambda: stop_editing("expense"))


# =============================================================================
# VENDORS
# =============================================================================

def render_vendors_page(services: PlannerServices):
    st.title("🏪 Vendors")
    vendors = load_or_report(services.vendors.list())

    col1, col2, col3 = st.columns(3)
    with col1:
        query = st.text_input("🔍 Search vendors", key="vendor_search")
    with col2:
        status = st.selectbox("Status", [None] + list(VendorStatus), format_func=label, key="vendor_status_filter")
    with col3:
        category = st.selectbox(
            "Category",
            [None] + distinct_categories(vendors),
            format_func=lambda c: "All" if c is None else c,
        )

    if st.button("➕ New vendor"):
        start_editing("vendor", None)
        st.rerun()

    if editing("vendor"):
        render_vendor_form(services, {v.id: v for v in vendors}.get(editing("vendor")))

    shown = filter_vendors(vendors, query, status, category)
    st.caption(f"{len(shown)} of {len(vendors)} vendors")

    for vendor in shown:
        with st.expander(f"{vendor.name} · {vendor.category} · {label(vendor.status)}"):
            if vendor.contact_name:
                st.markdown(f"👤 {vendor.contact_name}")
            if vendor.email:
                st.markdown(f"📧 {vendor.email}")
            if vendor.phone:
                st.markdown(f"📞 {vendor.phone}")
            if vendor.website:
                st.markdown(f"🌐 {vendor.website}")
            if vendor.notes:
                st.write(vendor.notes)
            if st.button("✏️ Edit", key=f"edit_vendor_{vendor.id}"):
                start_editing("vendor", vendor.id)
                st.rerun()
            delete_controls("vendor", vendor.id, vendor.name, lambda v=vendor: services.vendors.delete(v.id))


def render_vendor_form(services: PlannerServices, current):
    form_key = "vendor_form"
    with st.form(form_key):
        form_banner(form_key)
        st.markdown("### ✏️ Edit vendor" if current else "### ➕ New vendor")
        col1, col2, col3 = st.columns(3)
        with col1:
            name = st.text_input("Name *", value=current.name if current else "")
            field_errors(form_key, "name")
        with col2:
            category = st.text_input("Category *", value=current.category if current else "")
            field_errors(form_key, "category")
        with col3:
            status = st.selectbox(
                "Status", list(VendorStatus), format_func=label,
                index=list(VendorStatus).index(current.status) if current else 0,
            )

        col1, col2 = st.columns(2)
        with col1:
            contact_name = st.text_input("Contact person", value=(current.contact_name or "") if current else "")
            field_errors(form_key, "contact_name")
            email = st.text_input("Email", value=(current.email or "") if current else "")
            field_errors(form_key, "email")
        with col2:
            phone = st.text_input("Phone", value=(current.phone or "") if current else "")
            field_errors(form_key, "phone")
            website = st.text_input("Website", value=(current.website or "") if current else "")
            field_errors(form_key, "website")

        notes = st.text_area("Notes", value=(current.notes or "") if current else "")
        field_errors(form_key, "notes")

        col1, col2 = st.columns(2)
        saved = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("Cancel")

    if cancelled:
        stop_editing("vendor")
        st.rerun()

    if saved:
        raw = {
            "name": name,
            "category": category,
            "status": status,
            "contact_name": contact_name,
            "email": email,
            "phone": phone,
            "website": website,
            "notes": notes,
        }
        if current:
            submit_form(form_key, VendorUpdate, raw,
                        lambda m: services.vendors.update(current.id, m),
                        on_success=lambda: stop_editing("vendor"))
        else:
            submit_form(form_key, VendorCreate, raw, services.vendors.create,
                        on_success=lambda: stop_editing("vendor"))


# =============================================================================
# TIMELINE
# =============================================================================

def render_timeline_page(services: PlannerServices):
    st.title("🗓️ Timeline")
    events = load_or_report(services.timeline.list())

    query = st.text_input("🔍 Search events", key="event_search")

    if st.button("➕ New event"):
        start_editing("event", None)
        st.rerun()

    if editing("event"):
        render_event_form(services, {e.id: e for e in events}.get(editing("event")))

    shown = filter_events(events, query)
    st.caption(f"{len(shown)} of {len(events)} events")

    for event in shown:
        when = f"{event.event_date}"
        if event.start_time:
            when += f" {event.start_time}"
            if event.end_time:
                when += f"–{event.end_time}"
        with st.expander(f"{when} · {event.title}"):
            if event.location:
                st.markdown(f"📍 {event.location}")
            if event.description:
                st.write(event.description)
            if st.button("✏️ Edit", key=f"edit_event_{event.id}"):
                start_editing("event", event.id)
                st.rerun()
            delete_controls("event", event.id, event.title, lambda e=event: services.timeline.delete(e.id))


def render_event_form(services: PlannerServices, current):
    form_key = "event_form"
    with st.form(form_key):
        form_banner(form_key)
        st.markdown("### ✏️ Edit event" if current else "### ➕ New event")
        title = st.text_input("Title *", value=current.title if current else "")
        field_errors(form_key, "title")

        col1, col2, col3 = st.columns(3)
        with col1:
            event_date = st.date_input("Date *", value=current.event_date if current else None)
            field_errors(form_key, "event_date")
        with col2:
            start_time = st.text_input(
                "Start (HH:MM)",
                value=(current.start_time or "") if current else "",
            )
            field_errors(form_key, "start_time")
        with col3:
            end_time = st.text_input(
                "End (HH:MM)",
                value=(current.end_time or "") if current else "",
            )
            field_errors(form_key, "end_time")

        location = st.text_input("Location", value=(current.location or "") if current else "")
        field_errors(form_key, "location")
        description = st.text_area("Description", value=(current.description or "") if current else "")
        field_errors(form_key, "description")

        col1, col2 = st.columns(2)
        saved = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("Cancel")

    if cancelled:
        stop_editing("event")
        st.rerun()

    if saved:
        raw = {
            "title": title,
            "event_date": event_date,
            "start_time": start_time,
            "end_time": end_time,
            "location": location,
            "description": description,
        }
        if current:
            submit_form(form_key, TimelineEventUpdate, raw,
                        lambda m: services.timeline.update(current.id, m),
                        on_success=lambda: stop_editing("event"),
                        current=current)
        else:
            submit_form(form_key, TimelineEventCreate, raw, services.timeline.create,
                        on_success=lambda: stop_editing("event"))


# =============================================================================
# NOTES
# =============================================================================

def render_notes_page(services: PlannerServices):
    st.title("📝 Notes")
    notes = load_or_report(services.notes.list())

    col1, col2 = st.columns(2)
    with col1:
        query = st.text_input("🔍 Search notes", key="note_search")
    with col2:
        tag = st.selectbox(
            "Tag",
            [None] + distinct_tags(notes),
            format_func=lambda t: "All" if t is None else t,
        )

    if st.button("➕ New note"):
        start_editing("note", None)
        st.rerun()

    if editing("note"):
        render_note_form(services, {n.id: n for n in notes}.get(editing("note")))

    shown = filter_notes(notes, query, tag)
    st.caption(f"{len(shown)} of {len(notes)} notes")

    for note in shown:
        with st.container(border=True):
            st.markdown(f"**{note.title}**")
            if note.tags:
                st.caption(" ".join(f"#{t}" for t in note.tags))
            st.write(note.content)
            if st.button("✏️ Edit", key=f"edit_note_{note.id}"):
                start_editing("note", note.id)
                st.rerun()
            delete_controls("note", note.id, note.title, lambda n=note: services.notes.delete(n.id))


def render_note_form(services: PlannerServices, current):
    form_key = "note_form"
    with st.form(form_key):
        form_banner(form_key)
        st.markdown("### ✏️ Edit note" if current else "### ➕ New note")
        title = st.text_input("Title *", value=current.title if current else "")
        field_errors(form_key, "title")
        content = st.text_area("Content *", value=current.content if current else "", height=200)
        field_errors(form_key, "content")
        tags = st.text_input(
            "Tags (comma separated)",
            value=", ".join(current.tags) if current else "",
        )
        field_errors(form_key, "tags")

        col1, col2 = st.columns(2)
        saved = col1.form_submit_button("💾 Save", type="primary")
        cancelled = col2.form_submit_button("Cancel")

    if cancelled:
        stop_editing("note")
        st.rerun()

    if saved:
        raw = {"title": title, "content": content, "tags": tags.split(",")}
        if current:
            submit_form(form_key, NoteUpdate, raw,
                        lambda m: services.notes.update(current.id, m),
                        on_success=lambda: stop_editing("note"))
        else:
            submit_form(form_key, NoteCreate, raw, services.notes.create,
                        on_success=lambda: stop_editing("note"))


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page(services: PlannerServices):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    groups = [
        ("Google Sheets (Storage)", "google_sheets"),
        ("Password gate", "auth"),
        ("Dashboard", "dashboard"),
        ("Application", "app"),
    ]

    for name, key in groups:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if not services.is_available:
        st.error(f"❌ Document store - {services.store.reason}")

    st.markdown("---")
    st.markdown("### Wedding")

    project = load_or_report(services.project.ensure_main_project())
    form_key = "project_form"
    with st.form(form_key):
        form_banner(form_key)
        name = st.text_input("Name *", value=project.name)
        field_errors(form_key, "name")
        wedding_date = st.date_input("Wedding date", value=project.wedding_date)
        currency = st.text_input("Currency", value=project.currency, max_chars=3)
        field_errors(form_key, "currency")
        owners_note = st.text_area("Note", value=project.owners_note)
        field_errors(form_key, "owners_note")
        saved = st.form_submit_button("💾 Save", type="primary")

    if saved:
        submit_form(
            form_key,
            ProjectUpdate,
            {
                "name": name,
                "wedding_date": wedding_date,
                "currency": currency,
                "owners_note": owners_note,
            },
            services.project.update_main_project,
        )

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with the Google "
        "Sheets credentials and the planner password. "
        "See `.env.example` for the required variables."
    )


def main():
    """Main application entry point."""
    session = require_session()
    services, dashboard_flow, budget_flow = get_components()

    # Sidebar navigation
    st.sidebar.title("💍 Wedding Planner")
    render_session_box(session)
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "📊 Dashboard",
            "✅ Tasks",
            "👥 Guests",
            "💰 Budget",
            "🏪 Vendors",
            "🗓️ Timeline",
            "📝 Notes",
            "⚙️ Settings",
        ],
        index=0,
    )

    if not services.is_available:
        st.sidebar.error("Document store unavailable - see Settings")

    # Route to appropriate page
    if page == "📊 Dashboard":
        render_dashboard_page(dashboard_flow)
    elif page == "✅ Tasks":
        render_tasks_page(services)
    elif page == "👥 Guests":
        render_guests_page(services)
    elif page == "💰 Budget":
        render_budget_page(services, budget_flow)
    elif page == "🏪 Vendors":
        render_vendors_page(services)
    elif page == "🗓️ Timeline":
        render_timeline_page(services)
    elif page == "📝 Notes":
        render_notes_page(services)
    elif page == "⚙️ Settings":
        render_settings_page(services)


if __name__ == "__main__":
    main()
