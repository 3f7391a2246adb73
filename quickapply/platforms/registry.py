"""Platform name -> adapter class"""

from quickapply.platforms.dice import DiceAdapter
from quickapply.platforms.indeed import IndeedAdapter
from quickapply.platforms.jobright import JobrightAdapter
from quickapply.platforms.linkedin import LinkedInAdapter

ADAPTERS = {
    adapter.name: adapter
    for adapter in (LinkedInAdapter, IndeedAdapter, DiceAdapter, JobrightAdapter)
}


def get_adapter(name, settings, pacing):
    try:
        adapter_class = ADAPTERS[name]
    except KeyError:
        raise ValueError(f"Unknown platform: {name}") from None
    return adapter_class(settings, pacing)
