import unittest

from schema_parser import (
    TableSchema,
    extract_table_body,
    extract_table_name,
    is_constraint,
    normalize_whitespace,
    parse_create_table,
    split_table_body,
)


USERS_SQL = """
CREATE TABLE `users` (
    `id` INT NOT NULL AUTO_INCREMENT,
    `name`   VARCHAR(50)  NOT NULL,
    price DECIMAL(10,2) DEFAULT 0.00,
    PRIMARY KEY (`id`),
    UNIQUE KEY uq_name (`name`),
    KEY idx_price (price),
    CONSTRAINT fk_org FOREIGN KEY (org_id) REFERENCES orgs (id)
);
"""


class TestParseCreateTable(unittest.TestCase):
    def test_parses_table_name_columns_and_constraints(self) -> None:
        schema = parse_create_table(USERS_SQL)
        self.assertEqual(schema.table_name, "users")
        self.assertEqual(
            schema.columns,
            {
                "id": "INT NOT NULL AUTO_INCREMENT",
                "name": "VARCHAR(50) NOT NULL",
                "price": "DECIMAL(10,2) DEFAULT 0.00",
            },
        )
        self.assertEqual(
            schema.constraints,
            [
                "PRIMARY KEY (`id`)",
                "UNIQUE KEY uq_name (`name`)",
                "KEY idx_price (price)",
                "CONSTRAINT fk_org FOREIGN KEY (org_id) REFERENCES orgs (id)",
            ],
        )

    def test_column_order_follows_source(self) -> None:
        schema = parse_create_table("CREATE TABLE t (b INT, a INT, c INT)")
        self.assertEqual(list(schema.columns), ["b", "a", "c"])

    def test_nested_parentheses_stay_in_one_clause(self) -> None:
        schema = parse_create_table("CREATE TABLE products (price DECIMAL(10,2), qty INT)")
        self.assertEqual(schema.columns, {"price": "DECIMAL(10,2)", "qty": "INT"})

    def test_table_name_is_case_insensitive(self) -> None:
        schema = parse_create_table("create table Orders (id int)")
        self.assertEqual(schema.table_name, "Orders")
        self.assertEqual(schema.columns, {"id": "int"})

    def test_missing_table_name_is_unknown(self) -> None:
        schema = parse_create_table("(id INT, name TEXT)")
        self.assertEqual(schema.table_name, "unknown")
        self.assertEqual(schema.columns, {"id": "INT", "name": "TEXT"})

    def test_missing_body_yields_empty_schema(self) -> None:
        schema = parse_create_table("this is not sql at all")
        self.assertEqual(schema, TableSchema(table_name="unknown", columns={}, constraints=[]))

    def test_unparsable_clause_is_dropped(self) -> None:
        schema = parse_create_table("CREATE TABLE t (id INT, lonely, , name TEXT)")
        self.assertEqual(schema.columns, {"id": "INT", "name": "TEXT"})
        self.assertEqual(schema.constraints, [])

    def test_trailing_table_options_are_ignored(self) -> None:
        schema = parse_create_table(
            "CREATE TABLE t (id INT) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='x (y)';"
        )
        self.assertEqual(schema.columns, {"id": "INT"})

    def test_multiline_definition_is_normalized(self) -> None:
        schema = parse_create_table("CREATE TABLE t (\n  created_at\tDATETIME\n    DEFAULT CURRENT_TIMESTAMP\n)")
        self.assertEqual(schema.columns, {"created_at": "DATETIME DEFAULT CURRENT_TIMESTAMP"})

    def test_constraint_names_never_become_columns(self) -> None:
        schema = parse_create_table(USERS_SQL)
        for name in ("PRIMARY", "UNIQUE", "KEY", "CONSTRAINT"):
            self.assertNotIn(name, schema.columns)


class TestHelpers(unittest.TestCase):
    def test_normalize_whitespace(self) -> None:
        self.assertEqual(normalize_whitespace("  a \n\t b   c  "), "a b c")

    def test_extract_table_name_with_backticks(self) -> None:
        self.assertEqual(extract_table_name("CREATE TABLE `my_tbl` (id INT)"), "my_tbl")

    def test_extract_table_body_uses_matching_parenthesis(self) -> None:
        self.assertEqual(extract_table_body("CREATE TABLE t (a DECIMAL(1,2), b INT) X (y)"), "a DECIMAL(1,2), b INT")

    def test_extract_table_body_unbalanced_falls_back_to_last_paren(self) -> None:
        self.assertEqual(extract_table_body("CREATE TABLE t (a INT, b DECIMAL(1,2)"), "a INT, b DECIMAL(1,2")

    def test_extract_table_body_none_without_parenthesis(self) -> None:
        self.assertIsNone(extract_table_body("CREATE TABLE t"))

    def test_split_table_body_keeps_final_clause(self) -> None:
        self.assertEqual(split_table_body("a INT, b ENUM('x','y'), c INT"), ["a INT", "b ENUM('x','y')", "c INT"])

    def test_is_constraint(self) -> None:
        self.assertTrue(is_constraint("primary key (id)"))
        self.assertTrue(is_constraint("INDEX idx (a)"))
        self.assertTrue(is_constraint("Foreign Key (a) REFERENCES b (id)"))
        self.assertFalse(is_constraint("`id` INT"))


if __name__ == "__main__":
    unittest.main()
