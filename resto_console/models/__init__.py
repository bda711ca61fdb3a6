from resto_console.models.tenant import Tenant, TenantStatus
from resto_console.models.directory import DirectoryEntry
from resto_console.models.tenant_collection import TenantCollection
from resto_console.models.user import TenantUser
from resto_console.models.menu_item import MenuItem, ItemCodeCounter
from resto_console.models.settings_document import SettingsDocument
