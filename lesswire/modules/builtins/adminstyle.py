from lesswire.modules import register, Module
from lesswire.modules.adminstyle import AdminStyle


@register()
class AdminStyleModule(AdminStyle, Module):
    """
    Admin style using the variables from the app's `admin_style.vars` setting.
    """
    name = 'AdminStyle'
    summary = 'Admin theme style from app settings'

    def get_style_vars(self):
        return dict(self.app.settings['admin_style'].get('vars', {}))
