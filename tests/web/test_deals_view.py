from spot_deals.web.deals_view import DealsView


class TestDealsView:
    def test_global_rows(self, app_instance):
        rows = DealsView(app_instance).global_rows(top_n=5)

        assert [row["Rank"] for row in rows] == [1, 2]
        assert rows[0]["Region"] == "us-west-2"
        assert rows[0]["Price per vCPU ($/h)"] == 0.075
        assert rows[1]["Spot price ($/h)"] == 0.8

    def test_region_rows(self, app_instance):
        rows = DealsView(app_instance).region_rows("us-east-1")

        assert rows == [{
            "Instance type": "m5.large",
            "vCPUs": 8,
            "Memory": "16 GiB",
            "Savings": "60%",
            "Spot price ($/h)": 0.8,
            "Price per vCPU ($/h)": 0.1,
        }]

    def test_available_regions(self, app_instance):
        assert DealsView(app_instance).get_available_regions() == ["us-east-1", "us-west-2"]
