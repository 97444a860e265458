"""Top-level package for the Smart Finance dashboard.

The primary modules are:

* ``data_processing`` – reading CSV files and normalizing rows into transactions
* ``ledger`` – the in-memory transaction store
* ``analytics`` – period/filter views, totals, category and monthly aggregates
* ``pagination`` – page slicing and page-number windows
* ``assistant`` – question answering with a local fallback
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run smart_finance/dashboard.py
```
"""

from . import analytics  # noqa: F401  # re-exported for convenience
from . import data_processing  # noqa: F401  # re-exported for convenience
from . import pagination  # noqa: F401  # re-exported for convenience
from .ledger import Ledger  # noqa: F401
from .models import FilterSpec, Transaction  # noqa: F401

# Streamlit is not needed to use the engine (e.g. during unit testing).
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore


__all__ = ["analytics", "data_processing", "pagination", "dashboard", "Ledger", "FilterSpec", "Transaction"]
