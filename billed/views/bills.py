"""Employee bill list"""

from html import escape
from typing import Optional, Sequence

from billed.schemas.bill import Bill
from billed.views.layout import error_page, loading_page, modal, text, vertical_layout


def _row(bill: Bill) -> str:
    url_attr = f' data-bill-url="{escape(str(bill.file_url), quote=True)}"' if bill.file_url else ""
    amount = "" if bill.amount is None else f"{bill.amount} €"
    return f"""
      <tr>
        <td>{text(bill.type)}</td>
        <td>{text(bill.name)}</td>
        <td>{text(bill.date)}</td>
        <td>{amount}</td>
        <td>{text(bill.status)}</td>
        <td>
          <div class="icon-actions">
            <div id="eye" data-testid="icon-eye"{url_attr}><span class="icon">&#128065;</span></div>
          </div>
        </td>
      </tr>
    """


def bills_page(
    data: Optional[Sequence[Bill]] = None,
    loading: bool = False,
    error: Optional[str] = None,
) -> str:
    if loading:
        return loading_page()
    if error:
        return error_page(error)

    rows = "".join(_row(bill) for bill in data or [])
    return f"""
    <div class="layout">
      {vertical_layout(120)}
      <div class="content">
        <div class="content-header">
          <div class="content-title"> Mes notes de frais </div>
          <button type="button" data-testid="btn-new-bill" class="btn btn-primary">Nouvelle note de frais</button>
        </div>
        <div id="data-table">
          <table id="example" class="table table-striped" style="width:100%">
            <thead>
              <tr>
                <th>Type</th><th>Nom</th><th>Date</th><th>Montant</th><th>Statut</th><th>Actions</th>
              </tr>
            </thead>
            <tbody data-testid="tbody">{rows}</tbody>
          </table>
        </div>
      </div>
      {modal()}
    </div>
    """
