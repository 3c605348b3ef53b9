#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for input loaders, validation, configuration and run settings
"""

import os
import sys
import json
import shutil
import tempfile
import unittest
from argparse import Namespace

import numpy as np
import pandas as pd

# Add project root to path if needed for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from allnba_share.config import columns as cols
from allnba_share.config.model_config import get_default_config, TARGET_TOTAL_SHARE
from allnba_share.data.loaders import (
    load_game_logs,
    load_voting_shares,
    load_team_game_counts,
    compute_team_game_counts,
    load_alias_table,
    load_unavailable_players,
    load_playoff_logs,
)
from allnba_share.data.validation import (
    validate_label_totals,
    validate_player_seasons,
    find_unlabelled_seasons,
)
from allnba_share.output.persistence import save_predictions, load_saved_predictions
from allnba_share.utils.errors import PipelineDataError, MissingColumnsError
from allnba_share.utils.settings import PipelineSettings
from tests import synthetic_data


class LoaderTestCase(unittest.TestCase):
    """Base test case with a temporary directory"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def path(self, name):
        return os.path.join(self.temp_dir, name)


class TestTableLoaders(LoaderTestCase):

    def test_game_logs_round_trip(self):
        logs = synthetic_data.make_game_logs(seasons=(2021,))
        logs.to_csv(self.path("logs.csv"), index=False)
        loaded = load_game_logs(self.path("logs.csv"))
        self.assertEqual(len(loaded), len(logs))
        self.assertTrue(pd.api.types.is_datetime64_any_dtype(loaded[cols.GAME_DATE]))

    def test_game_logs_missing_column(self):
        logs = synthetic_data.make_game_logs(seasons=(2021,)).drop(columns=["OREB"])
        logs.to_csv(self.path("logs.csv"), index=False)
        with self.assertRaises(MissingColumnsError) as ctx:
            load_game_logs(self.path("logs.csv"))
        self.assertEqual(ctx.exception.missing, ["OREB"])

    def test_game_logs_unparseable_minutes(self):
        """Minutes written as MM:SS are rejected, naming the column and value"""
        logs = synthetic_data.make_game_logs(seasons=(2021,))
        logs["MIN"] = logs["MIN"].map(lambda m: f"{int(m)}:00")
        logs.to_csv(self.path("logs.csv"), index=False)
        with self.assertRaises(PipelineDataError) as ctx:
            load_game_logs(self.path("logs.csv"))
        self.assertIn("MIN", str(ctx.exception))
        self.assertIn("36:00", str(ctx.exception))
        self.assertIn("row 0", str(ctx.exception))

    def test_game_logs_blank_cells_read_as_zero(self):
        logs = synthetic_data.make_game_logs(seasons=(2021,))
        logs.loc[0, "MIN"] = np.nan
        logs.loc[1, "PTS"] = np.nan
        logs.to_csv(self.path("logs.csv"), index=False)
        loaded = load_game_logs(self.path("logs.csv"))
        self.assertEqual(loaded.loc[0, "MIN"], 0.0)
        self.assertEqual(loaded.loc[1, "PTS"], 0.0)

    def test_playoff_logs_unparseable_minutes(self):
        pd.DataFrame({"PLAYER_ID": [1, 2], "SEASON": [2021, 2021], "MIN": ["12", "40:30"]}).to_csv(
            self.path("playoffs.csv"), index=False)
        with self.assertRaises(PipelineDataError) as ctx:
            load_playoff_logs(self.path("playoffs.csv"))
        self.assertIn("row 1", str(ctx.exception))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_game_logs(self.path("nope.csv"))

    def test_voting_shares(self):
        synthetic_data.make_voting_labels().to_csv(self.path("votes.csv"), index=False)
        labels = load_voting_shares(self.path("votes.csv"))
        self.assertIn("Nikola Jokić*", labels[cols.LABEL_PLAYER].tolist())

    def test_voting_share_out_of_range(self):
        pd.DataFrame({"PLAYER": ["A"], "SEASON": [2021], "SHARE": [1.2]}).to_csv(
            self.path("votes.csv"), index=False)
        with self.assertRaises(PipelineDataError):
            load_voting_shares(self.path("votes.csv"))

    def test_team_game_counts(self):
        logs = synthetic_data.make_game_logs(seasons=(2021,))
        counts = compute_team_game_counts(logs)
        self.assertTrue((counts[cols.TEAM_GAMES] == synthetic_data.GAMES_PER_TEAM).all())

        counts.to_csv(self.path("teams.csv"), index=False)
        loaded = load_team_game_counts(self.path("teams.csv"))
        self.assertEqual(loaded.columns.tolist(), [cols.TEAM, cols.SEASON, cols.TEAM_GAMES])


class TestAliasAndAvailability(LoaderTestCase):

    def test_packaged_alias_table(self):
        aliases = load_alias_table()
        self.assertEqual(aliases["Nikola Jokić"], "Nikola Jokic")

    def test_alias_table_must_be_object(self):
        with open(self.path("aliases.json"), "w") as f:
            json.dump(["not", "a", "mapping"], f)
        with self.assertRaises(PipelineDataError):
            load_alias_table(self.path("aliases.json"))

    def test_unavailable_players(self):
        with open(self.path("out.txt"), "w", encoding="utf-8") as f:
            f.write("# injured\nNikola Jokić\n\n  Luka Doncic  \n")
        self.assertEqual(load_unavailable_players(self.path("out.txt")),
                         ["Nikola Jokić", "Luka Doncic"])
        self.assertEqual(load_unavailable_players(None), [])


class TestValidation(unittest.TestCase):

    def test_label_totals(self):
        labels = synthetic_data.make_voting_labels()
        self.assertEqual(validate_label_totals(labels), {})

        labels.loc[0, cols.SHARE] = 0.5
        with self.assertLogs('allnba_share.data.validation', level='WARNING'):
            off = validate_label_totals(labels)
        self.assertEqual(list(off), [2020])
        with self.assertRaises(PipelineDataError):
            validate_label_totals(labels, strict=True)

    def test_unlabelled_seasons(self):
        labels = synthetic_data.make_voting_labels(seasons=(2020,))
        self.assertEqual(find_unlabelled_seasons([2020], labels), [])
        with self.assertRaises(PipelineDataError):
            find_unlabelled_seasons([2020, 2021], labels)
        with self.assertLogs('allnba_share.data.validation', level='ERROR'):
            missing = find_unlabelled_seasons([2021, 2020, 2019], labels, strict=False)
        self.assertEqual(missing, [2019, 2021])

    def test_player_season_fraction_out_of_range(self):
        df = pd.DataFrame({cols.PLAYER_ID: [1], cols.SEASON: [2021], cols.MINUTES_FRACTION: [1.5]})
        with self.assertRaises(PipelineDataError):
            validate_player_seasons(df)


class TestSavedPredictions(LoaderTestCase):

    def test_reads_back_saved_files(self):
        predictions = pd.DataFrame({
            cols.PLAYER_ID: [1, 2],
            cols.PLAYER_NAME: ["Nikola Jokic", "Luka Doncic"],
            cols.SEASON: [2022, 2022],
            cols.ADJUSTED_SHARE: [0.9, 0.75],
        })
        csv_path, json_path = save_predictions(predictions, output_dir=self.temp_dir, season=2022)
        self.assertIn("allnba_share_predictions_2022_", os.path.basename(csv_path))
        for path in (csv_path, json_path):
            pd.testing.assert_frame_equal(load_saved_predictions(path), predictions)

    def test_unsupported_format(self):
        with self.assertRaises(ValueError):
            load_saved_predictions(self.path("predictions.parquet"))


class TestConfiguration(LoaderTestCase):

    def test_defaults(self):
        config = get_default_config()
        self.assertEqual(config['reconstruction']['target_total'], TARGET_TOTAL_SHARE)
        self.assertEqual(config['reconstruction']['iterations'], 10)
        self.assertIsNone(config['training']['prediction_season'])

    def test_file_and_dict_overrides(self):
        with open(self.path("config.json"), "w") as f:
            json.dump({'training': {'test_size': 0.3}, 'reconstruction': {'iterations': 5}}, f)
        config = get_default_config(self.path("config.json"),
                                    config={'reconstruction': {'iterations': 20}}, season=2022)
        self.assertEqual(config['training']['test_size'], 0.3)
        self.assertEqual(config['training']['magnitude_random_state'], 42)
        self.assertEqual(config['reconstruction']['iterations'], 20)
        self.assertEqual(config['training']['prediction_season'], 2022)

    def test_missing_config_file(self):
        with self.assertRaises(FileNotFoundError):
            get_default_config(self.path("missing.json"))


class TestPipelineSettings(unittest.TestCase):

    def test_update_from_args(self):
        args = Namespace(game_logs="logs.csv", voting="votes.csv", season="2022",
                         output_dir="out", config=None, save_model=True, plot=False, verbose=False)
        settings = PipelineSettings()
        settings.update_from_args(args)
        self.assertEqual(settings.season, 2022)
        self.assertTrue(settings.save_model)
        self.assertEqual(settings.output_dir, "out")

    def test_dict_round_trip(self):
        settings = PipelineSettings("logs.csv", "votes.csv", season=2021)
        restored = PipelineSettings.from_dict(settings.to_dict())
        self.assertEqual(restored.to_dict(), settings.to_dict())


if __name__ == '__main__':
    unittest.main()
