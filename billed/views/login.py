"""Login page with the employee and admin forms"""


def _form(prefix: str, title: str) -> str:
    return f"""
      <div class="login-form">
        <h2>{title}</h2>
        <form data-testid="form-{prefix}">
          <label for="{prefix}-email">Votre email</label>
          <input type="email" data-testid="{prefix}-email-input" class="form-control" placeholder="johndoe@email.com" required />
          <label for="{prefix}-password">Mot de passe</label>
          <input type="password" data-testid="{prefix}-password-input" class="form-control" placeholder="******" required />
          <button type="submit" class="btn btn-primary" data-testid="{prefix}-login-button">Se connecter</button>
        </form>
      </div>
    """


def login_page() -> str:
    return f"""
    <div class="login-page">
      <div class="login-title">Billed</div>
      {_form("employee", "Employé")}
      {_form("admin", "Administration")}
    </div>
    """
