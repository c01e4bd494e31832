"""Fixtures shared by the HTTP and MCP integration tests."""

import pytest

from locallinks.storage.database import set_db


@pytest.fixture
def seeded(temp_db, db_session, factory):
    """
    Angus with a broken waste link and Fife with a working one, installed
    as the global database.

    Yields:
        Dictionary of the ids and codes the tests address
    """
    angus = factory.authority(name="Angus", homepage_url="http://www.angus.gov.uk")
    fife = factory.authority(name="Fife")
    service = factory.service(label="Waste", lgsl_code=524)
    interaction = factory.interaction(label="Find out", lgil_code=8)
    service_interaction = factory.service_interaction(service, interaction)
    broken = factory.link(angus, service_interaction, url="http://www.angus.gov.uk/waste", status="broken")
    ok = factory.link(fife, service_interaction, url="http://www.fife.gov.uk/waste", status="ok", analytics=73)

    ids = {
        "broken_link_id": broken.id,
        "ok_link_id": ok.id,
        "service_interaction_id": service_interaction.id,
    }
    db_session.close()

    set_db(temp_db)
    yield ids
    set_db(None)
