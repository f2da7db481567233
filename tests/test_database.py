from unittest.mock import MagicMock, patch
from sqlmodel import Session, SQLModel

from app.database.database import engine, create_db_and_tables, get_session


class TestDatabase:
    def test_every_table_is_registered(self):
        assert {"volunteer", "opportunity", "opportunity_skill", "signup"} <= set(
            SQLModel.metadata.tables
        )

    @patch("app.database.database.SQLModel")
    def test_create_db_and_tables_uses_module_engine(self, mock_sqlmodel):
        mock_sqlmodel.metadata = MagicMock()

        create_db_and_tables()

        mock_sqlmodel.metadata.create_all.assert_called_once_with(engine)

    def test_get_session_yields_session(self):
        generator = get_session()
        session = next(generator)

        assert isinstance(session, Session)
        generator.close()
