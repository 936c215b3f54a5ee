"""Shared page chrome: vertical navigation bar, loading, error and not-found pages."""

from html import escape


def vertical_layout(height: int = 100) -> str:
    return f"""
    <div class="vertical-navbar" style="height: {height}vh;">
      <div class="layout-title"><span>Billed</span></div>
      <div id="layout-icon1" data-testid="icon-window"><span class="icon">&#9635;</span></div>
      <div id="layout-icon2" data-testid="icon-mail"><span class="icon">&#9993;</span></div>
      <div id="layout-disconnect" data-testid="layout-disconnect"><span class="icon">&#9211;</span></div>
    </div>
    """


def loading_page() -> str:
    return f"""
    <div class="layout">
      {vertical_layout()}
      <div class="content" id="loading">Loading...</div>
    </div>
    """


def error_page(error: str) -> str:
    return f"""
    <div class="layout">
      {vertical_layout()}
      <div class="content">
        <div class="content-header">
          <div class="content-title"> Erreur </div>
        </div>
        <div data-testid="error-message">{escape(str(error) if error else "", quote=False)}</div>
      </div>
    </div>
    """


def not_found_page(path: str = "") -> str:
    return f"""
    <div class="layout">
      <div class="content" data-testid="not-found">
        <div class="content-title"> Page introuvable </div>
        <div>{escape(path, quote=False)}</div>
      </div>
    </div>
    """


def modal() -> str:
    return """
    <div class="modal fade" id="modaleFile" aria-hidden="true">
      <div class="modal-dialog modal-dialog-centered modal-lg">
        <div class="modal-content">
          <div class="modal-header"><h5 class="modal-title">Justificatif</h5></div>
          <div class="modal-body"></div>
        </div>
      </div>
    </div>
    """


def text(value) -> str:
    """Escaped text of a record field; records kept unvalidated may hold any type"""
    return "" if value is None else escape(str(value), quote=False)
