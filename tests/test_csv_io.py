import os
import tempfile
import unittest

from shopgen.csv_io import read_csv, write_csv
from shopgen.models import Product, User


class TestCsvIO(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "products.csv")

    def tearDown(self):
        self.tmp.cleanup()

    def test_header_and_plain_rows(self):
        rows = [Product(1, "Lamp Pro 123", "Home", 19.5).as_row()]
        write_csv(self.path, Product.columns(), rows)

        with open(self.path, encoding="utf-8") as f:
            content = f.read()
        self.assertEqual(content, "id,name,category,price\n1,Lamp Pro 123,Home,19.5\n")

    def test_comma_fields_are_quoted_and_quotes_doubled(self):
        product = Product(2, 'Chair, "Deluxe"', "Home", 120.0)
        write_csv(self.path, Product.columns(), [product.as_row()])

        with open(self.path, encoding="utf-8") as f:
            lines = f.read().splitlines()
        self.assertEqual(lines[1], '2,"Chair, ""Deluxe""",Home,120.0')

        records = read_csv(self.path, Product.columns())
        self.assertEqual(Product.from_csv_row(records[0]), product)

    def test_empty_collection_has_header_only(self):
        count = write_csv(self.path, User.columns(), [])
        self.assertEqual(count, 0)
        self.assertEqual(read_csv(self.path, User.columns()), [])

    def test_empty_file_reads_as_no_rows(self):
        open(self.path, "w").close()
        self.assertEqual(read_csv(self.path, Product.columns()), [])

    def test_header_mismatch(self):
        write_csv(self.path, ["id", "title"], [(1, "x")])
        with self.assertRaises(ValueError):
            read_csv(self.path, Product.columns())

    def test_wrong_field_count(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("id,name,category,price\n1,Lamp,Home\n")
        with self.assertRaises(ValueError):
            read_csv(self.path, Product.columns())

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            read_csv(os.path.join(self.tmp.name, "nope.csv"), Product.columns())

    def test_typed_reconstruction(self):
        row = {"id": "7", "name": "Ana", "email": "ana@example.com", "created_at": "2025-01-01T00:00:00.000Z"}
        user = User.from_csv_row(row)
        self.assertEqual(user.id, 7)
        self.assertIsInstance(user.id, int)
        self.assertEqual(user.created_at, "2025-01-01T00:00:00.000Z")

        product = Product.from_csv_row({"id": "1", "name": "Lamp", "category": "Home", "price": "9.99"})
        self.assertIsInstance(product.price, float)
        self.assertEqual(product.price, 9.99)


if __name__ == "__main__":
    unittest.main()
