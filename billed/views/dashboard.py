"""Admin dashboard: every user's bills, grouped by status"""

from html import escape
from typing import Optional, Sequence

from billed.models.enums import BillStatus
from billed.schemas.bill import Bill
from billed.utils.format import format_status
from billed.views.layout import error_page, loading_page, modal, text, vertical_layout


def _card(bill: Bill) -> str:
    bill_id = escape(str(bill.id or ""), quote=True)
    actions = ""
    if bill.status == BillStatus.PENDING.value:
        actions = f"""
          <textarea data-testid="commentary2" data-bill-id="{bill_id}" rows="2"></textarea>
          <button type="button" data-testid="btn-accept-bill" data-bill-id="{bill_id}" class="btn btn-primary">Accepter</button>
          <button type="button" data-testid="btn-refuse-bill" data-bill-id="{bill_id}" class="btn btn-secondary">Refuser</button>
        """
    return f"""
        <div class="bill-card" data-testid="open-bill{bill_id}">
          <div class="bill-card-name-container">
            <div class="bill-card-name">{text(bill.email)}</div>
            <span class="bill-card-grey">... {text(bill.name)}</span>
          </div>
          <div class="name-price-container"><span>{"" if bill.amount is None else bill.amount} €</span></div>
          <div class="date-type-container">
            <span>{text(bill.date)}</span>
            <span>{text(bill.type)}</span>
          </div>
          {actions}
        </div>
    """


def dashboard_page(
    data: Optional[Sequence[Bill]] = None,
    loading: bool = False,
    error: Optional[str] = None,
) -> str:
    if loading:
        return loading_page()
    if error:
        return error_page(error)

    sections = []
    for index, status in enumerate(BillStatus, 1):
        cards = "".join(_card(b) for b in data or [] if b.status == status.value)
        sections.append(f"""
      <div class="status-bills-header" data-testid="status-header{index}">
        <h3>{format_status(status.value)}</h3>
      </div>
      <div class="status-bills-container" data-testid="status-bills-container{index}">{cards}</div>
        """)
    return f"""
    <div class="layout">
      {vertical_layout(120)}
      <div class="dashboard-content">
        <div class="dashboard-left-container">{"".join(sections)}</div>
      </div>
      {modal()}
    </div>
    """
