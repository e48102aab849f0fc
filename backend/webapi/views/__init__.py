from webapi.views.users import (
    create_user as create_user,
)
from webapi.views.users import (
    delete_user as delete_user,
)
from webapi.views.users import (
    get_user_by_id as get_user_by_id,
)
from webapi.views.users import (
    get_users as get_users,
)
from webapi.views.users import (
    options_for_users as options_for_users,
)
from webapi.views.users import (
    partially_update_user as partially_update_user,
)
from webapi.views.users import (
    update_user as update_user,
)
