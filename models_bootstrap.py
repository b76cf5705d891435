# models_bootstrap.py
from client import models as _client_models
from user import models as _user_models
from posting import models as _posting_models
from application import models as _application_models
from review import models as _review_models
