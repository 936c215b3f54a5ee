"""New bill form"""

from typing import Optional

from billed.config import settings
from billed.models.enums import ExpenseType
from billed.views.layout import error_page, vertical_layout


def new_bill_page(error: Optional[str] = None) -> str:
    if error:
        return error_page(error)

    options = "".join(f"<option>{t.value}</option>" for t in ExpenseType)
    accept = ",".join(settings.ACCEPTED_FILE_TYPES)
    return f"""
    <div class="layout">
      {vertical_layout(120)}
      <div class="content">
        <div class="content-header">
          <div class="content-title"> Envoyer une note de frais </div>
        </div>
        <div class="form-newbill-container content-inner">
          <form data-testid="form-new-bill">
            <div class="col-md-6">
              <label for="expense-type">Type de dépense</label>
              <select required class="form-control blue-border" data-testid="expense-type">{options}</select>
              <label for="expense-name">Nom de la dépense</label>
              <input type="text" class="form-control blue-border" data-testid="expense-name" placeholder="Vol Paris Londres" />
              <label for="datepicker">Date</label>
              <input required type="date" class="form-control blue-border" data-testid="datepicker" />
              <label for="amount">Montant TTC</label>
              <input required type="number" class="form-control blue-border input-icon input-icon-right" data-testid="amount" placeholder="348" />
              <label for="vat">TVA</label>
              <input type="number" class="form-control blue-border" data-testid="vat" placeholder="70" />
              <input required type="number" class="form-control blue-border" data-testid="pct" placeholder="{settings.DEFAULT_PCT}" />
            </div>
            <div class="col-md-6">
              <label for="commentary">Commentaire</label>
              <textarea class="form-control blue-border" data-testid="commentary" rows="3"></textarea>
              <label for="file">Justificatif</label>
              <input required type="file" accept="{accept}" class="form-control blue-border" data-testid="file" />
            </div>
            <div class="col-md-6">
              <button type="submit" id="btn-send-bill" data-testid="btn-send-bill" class="btn btn-primary">Envoyer</button>
            </div>
          </form>
        </div>
      </div>
    </div>
    """
